"""Static capability policy for caller-supplied sorting programs.

The caller's source is parsed with tree-sitter and walked once. Any
construct that could reach outside the sorting handle (imports, dunder
access, private attributes, class machinery, unbounded arithmetic) is
reported as a violation before a single line is executed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tree_sitter import Node

from .parser import CALLER_LANGUAGE, Parser

logger = logging.getLogger(__name__)

KIND_SYNTAX = "syntax"
KIND_POLICY = "policy"


@dataclass(frozen=True)
class PolicyViolation:
    kind: str
    message: str
    line: int


class SourcePolicy:
    """Allow-list checks over a Python syntax tree."""

    FORBIDDEN_NODE_TYPES: dict[str, str] = {
        "import_statement": "imports are not allowed",
        "import_from_statement": "imports are not allowed",
        "future_import_statement": "imports are not allowed",
        "global_statement": "'global' is not allowed",
        "nonlocal_statement": "'nonlocal' is not allowed",
        "class_definition": "class definitions are not allowed",
        "decorator": "decorators are not allowed",
        "await": "'await' is not allowed",
        "async": "async functions are not allowed",
        "yield": "generators are not allowed",
        "generator_expression": "generator expressions are not allowed",
        "with_statement": "'with' blocks are not allowed",
        "finally_clause": "'finally' blocks are not allowed",
        "except_group_clause": "'except*' is not allowed",
        "exec_statement": "'exec' is not allowed",
        "print_statement": "Python 2 print statements are not supported",
    }

    FORBIDDEN_NAMES: frozenset[str] = frozenset(
        {
            "eval",
            "exec",
            "compile",
            "open",
            "input",
            "breakpoint",
            "globals",
            "locals",
            "vars",
            "dir",
            "getattr",
            "setattr",
            "delattr",
            "hasattr",
            "type",
            "object",
            "super",
            "memoryview",
            "help",
            "exit",
            "quit",
        }
    )

    FORBIDDEN_ATTRIBUTES: frozenset[str] = frozenset({"format", "format_map", "mro"})

    # Frame, code, traceback and generator internals lead back to host frames.
    INTROSPECTION_PREFIXES: tuple[str, ...] = ("gi_", "cr_", "ag_", "f_", "tb_", "co_")

    POWER_OPERATORS: frozenset[str] = frozenset({"**", "**="})

    def __init__(self, parser: Parser | None = None):
        self._parser = parser or Parser()

    def check(self, source: str) -> list[PolicyViolation]:
        """Return every violation found in *source*, in source order."""
        tree = self._parser.parse(source, CALLER_LANGUAGE)
        violations: list[PolicyViolation] = []
        stack: list[Node] = [tree.root_node]
        while stack:
            node = stack.pop()
            violation = self._check_node(node)
            if violation is not None:
                violations.append(violation)
            stack.extend(reversed(node.children))
        if violations:
            logger.info("Source rejected with %d violation(s)", len(violations))
        return violations

    def _check_node(self, node: Node) -> PolicyViolation | None:
        line = node.start_point[0] + 1
        if node.type == "ERROR" or node.is_missing:
            return PolicyViolation(KIND_SYNTAX, "invalid syntax", line)

        reason = self.FORBIDDEN_NODE_TYPES.get(node.type)
        if reason is not None:
            return PolicyViolation(KIND_POLICY, reason, line)

        if node.type == "identifier":
            return self._check_identifier(node, line)

        if node.type == "attribute":
            attr = node.child_by_field_name("attribute")
            name = _text(attr)
            if name.startswith("_"):
                return PolicyViolation(
                    KIND_POLICY, f"access to private attribute '{name}' is not allowed", line
                )
            if name.startswith(self.INTROSPECTION_PREFIXES):
                return PolicyViolation(
                    KIND_POLICY, f"introspection attribute '{name}' is not allowed", line
                )
            if name in self.FORBIDDEN_ATTRIBUTES:
                return PolicyViolation(
                    KIND_POLICY, f"attribute '{name}' is not allowed", line
                )

        if node.type == "subscript":
            key = _string_literal(node.child_by_field_name("subscript"))
            if key is not None and key.startswith("__"):
                return PolicyViolation(
                    KIND_POLICY, f"dunder key '{key}' is not allowed", line
                )

        if node.type == "except_clause" and _is_bare_except(node):
            return PolicyViolation(KIND_POLICY, "bare 'except:' is not allowed", line)

        if node.type in ("binary_operator", "augmented_assignment"):
            op = node.child_by_field_name("operator")
            if op is not None and op.type in self.POWER_OPERATORS:
                return PolicyViolation(
                    KIND_POLICY, "the power operator is not allowed", line
                )
        return None

    def _check_identifier(self, node: Node, line: int) -> PolicyViolation | None:
        name = _text(node)
        if name.startswith("__"):
            return PolicyViolation(
                KIND_POLICY, f"dunder name '{name}' is not allowed", line
            )
        if name in self.FORBIDDEN_NAMES and not _is_attribute_name(node):
            return PolicyViolation(KIND_POLICY, f"name '{name}' is not allowed", line)
        return None


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def _is_attribute_name(node: Node) -> bool:
    parent = node.parent
    if parent is None or parent.type != "attribute":
        return False
    attr = parent.child_by_field_name("attribute")
    return attr is not None and attr.start_byte == node.start_byte


def _string_literal(node: Node | None) -> str | None:
    if node is None or node.type != "string":
        return None
    return _text(node).lstrip("rRbBuU").strip("\"'")


def _is_bare_except(node: Node) -> bool:
    return all(child.type in ("block", "comment") for child in node.named_children)
