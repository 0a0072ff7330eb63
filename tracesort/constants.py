"""Named constants shared across the package."""

from __future__ import annotations

STATE_DEFAULT = "default"
STATE_COMPARING = "comparing"
STATE_SWAPPING = "swapping"
STATE_SORTED = "sorted"

ELEMENT_ID_TEMPLATE = "el-{index}"

DEFAULT_LABEL = "custom algorithm"
COMPLETED_DESCRIPTION = "Algorithm completed! All elements are sorted."

BOGO_MAX_ATTEMPTS = 50
TIM_MIN_RUN = 32
COMB_SHRINK_FACTOR = 1.3
RADIX_BASE = 10
MAX_COUNTING_RANGE = 100_000

USER_FILENAME = "<user-program>"
DEFAULT_ENTRY_POINT = "custom_sort"
DEFAULT_MAX_LINE_EVENTS = 200_000
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_TRACE_STEP_LIMIT = 20_000
MAX_RANGE_LENGTH = 1_000_000

MODE_INSTRUMENTED = "instrumented"
MODE_UNINSTRUMENTED = "uninstrumented"
