"""Syntax trees for caller-supplied sorting programs.

:class:`~tracesort.policy.SourcePolicy` vets every caller program before it
is compiled. It walks the tree-sitter syntax tree produced here rather than
Python's own ``ast`` so that a program which is rejected is never handed to
the host compiler at all. The factory seam lets tests inject a parser.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

CALLER_LANGUAGE = "python"


class ParserFactory(ABC):
    """Source of tree-sitter parsers, keyed by grammar name."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Loads grammars from tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


class Parser:
    """Parses caller programs, reusing one tree-sitter parser per grammar."""

    def __init__(self, parser_factory: ParserFactory | None = None):
        self._factory = parser_factory or TreeSitterParserFactory()
        self._parsers: dict[str, object] = {}

    def parse(self, source: str, language: str = CALLER_LANGUAGE):
        if language not in self._parsers:
            self._parsers[language] = self._factory.get_parser(language)
        return self._parsers[language].parse(source.encode("utf-8"))
