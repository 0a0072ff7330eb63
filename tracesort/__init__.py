"""Step-by-step sorting traces for visualization."""

from .container import TraceableContainer  # noqa: F401
from .trace_types import Element, ElementState, Step, Trace  # noqa: F401
from .algorithms import get_algorithm, run_algorithm  # noqa: F401
from .sandbox import SandboxResult, run_user_program  # noqa: F401
from .api import (  # noqa: F401
    trace_algorithm,
    trace_user_program,
    list_algorithms,
    dump_trace,
    trace_to_json,
)
