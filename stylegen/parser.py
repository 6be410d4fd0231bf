"""Stylesheet parsing layer — tree-sitter CSS grammar plus syntax-error reporting."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from . import constants

logger = logging.getLogger(__name__)


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


@dataclass(frozen=True)
class SyntaxIssue:
    """An ``ERROR`` or missing node in a parsed stylesheet (1-based location)."""

    line: int
    column: int
    text: str


class StylesheetParser:
    """Parses theme stylesheets with the CSS grammar.

    tree-sitter recovers from syntax errors by wrapping the unparsable input
    in ``ERROR`` nodes (or inserting zero-width missing nodes).  Every such
    node is logged once here; the theme walker then skips it.
    """

    LANGUAGE: str = constants.STYLESHEET_LANGUAGE

    def __init__(self, parser_factory: ParserFactory | None = None):
        self._factory = parser_factory or TreeSitterParserFactory()

    def parse(self, source: str):
        data = source.encode("utf-8")
        tree = self._factory.get_parser(self.LANGUAGE).parse(data)
        for issue in self.syntax_errors(tree, data):
            logger.warning(
                "Syntax error (line %d, column %d): %s",
                issue.line,
                issue.column,
                issue.text,
            )
        return tree

    def syntax_errors(self, tree, source: bytes) -> list[SyntaxIssue]:
        """Error and missing nodes of *tree*, in document order."""
        issues: list[SyntaxIssue] = []
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if node.type == constants.ERROR_NODE_TYPE or node.is_missing:
                issues.append(_issue(node, source))
                continue
            if node.has_error:
                stack.extend(reversed(node.children))
        return issues


def _issue(node, source: bytes) -> SyntaxIssue:
    if node.is_missing:
        text = f"missing {node.type}"
    else:
        text = source[node.start_byte : node.end_byte].decode("utf-8", "replace")
    return SyntaxIssue(
        line=node.start_point[0] + 1,
        column=node.start_point[1] + 1,
        text=text.strip(),
    )
