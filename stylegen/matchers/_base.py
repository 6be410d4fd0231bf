"""BaseMatcher — target-agnostic key trie → decision tree lowering."""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..printer import Printer
from ..trie import KeyTrie, count_nodes
from ..trie_types import EmptyTrie, Fanout, Inline, Leaf, Run, TrieNode
from .. import constants

logger = logging.getLogger(__name__)


class BaseMatcher:
    """Prints a lookup function for a built :class:`KeyTrie`.

    The walk keeps two numbers: ``position`` (bytes of the input already
    proven to match) and ``known_length`` (the largest length bound an
    enclosing guard has already checked).  A length guard is only printed when
    a node needs more than ``known_length``.

    Subclasses describe the target syntax by overriding the ``*_TEMPLATE``
    constants and the literal / case hooks.
    """

    # ── overridable constants ────────────────────────────────────

    FUNCTION_NAME: str = ""
    SIZE_VAR: str = "size"
    DATA_VAR: str = "data"

    LENGTH_GUARD_TEMPLATE: str = "if ({size} >= {min_size}) {{"
    LENGTH_EQUALS_TEMPLATE: str = "{size} == {length}"
    BYTE_EQUALS_TEMPLATE: str = "{data}[{position}] == {byte}"
    RANGE_EQUALS_TEMPLATE: str = "{data}[{position}:{end}] == {literal}"
    IF_TEMPLATE: str = "if ({condition}) {{"
    RETURN_IF_TEMPLATE: str = "if ({condition}) return {value};"
    RETURN_TEMPLATE: str = "return {value};"
    AND_OPERATOR: str = " && "
    BLOCK_CLOSE: str = "}"

    # ── init ─────────────────────────────────────────────────────

    def __init__(self):
        self._LOWER_DISPATCH: dict[type, Callable] = {
            Run: self._lower_run,
            Fanout: self._lower_fanout,
            Inline: self._lower_inline,
            Leaf: self._lower_leaf,
            EmptyTrie: self._lower_empty,
        }

    # ── entry points ─────────────────────────────────────────────

    def emit_function(self, printer: Printer, trie: KeyTrie) -> None:
        """Print a complete lookup function for *trie*."""
        self._emit_signature(printer)
        printer.indent()
        self._emit_prologue(printer)
        self.lower(printer, trie)
        printer.dedent()
        self._emit_epilogue(printer)

    def lower(self, printer: Printer, trie: KeyTrie | TrieNode) -> None:
        """Print the decision tree for *trie* followed by the not-found return."""
        root = trie.root if isinstance(trie, KeyTrie) else trie
        logger.debug(
            "Lowering key trie (%d nodes, min size %d) with %s",
            count_nodes(root),
            root.min_size,
            type(self).__name__,
        )
        self._lower_node(printer, root, 0, 0)
        printer.write_line(self.RETURN_TEMPLATE.format(value=constants.NOT_FOUND))

    # ── function frame hooks ─────────────────────────────────────

    def _emit_signature(self, printer: Printer) -> None:
        raise NotImplementedError

    def _emit_prologue(self, printer: Printer) -> None:
        pass

    def _emit_epilogue(self, printer: Printer) -> None:
        pass

    # ── literal hooks ────────────────────────────────────────────

    def _byte_literal(self, byte: int) -> str:
        return str(byte)

    def _bytes_literal(self, data: bytes) -> str:
        return repr(data)

    def _value_literal(self, value: Any) -> str:
        return str(value)

    # ── condition builders ───────────────────────────────────────

    def _length_equals(self, length: int) -> str:
        return self.LENGTH_EQUALS_TEMPLATE.format(size=self.SIZE_VAR, length=length)

    def _byte_equals(self, position: int, byte: int) -> str:
        return self.BYTE_EQUALS_TEMPLATE.format(
            data=self.DATA_VAR, position=position, byte=self._byte_literal(byte)
        )

    def _range_equals(self, position: int, literal: bytes) -> str:
        return self.RANGE_EQUALS_TEMPLATE.format(
            data=self.DATA_VAR,
            position=position,
            end=position + len(literal),
            literal=self._bytes_literal(literal),
            length=len(literal),
        )

    def _emit_return_if(self, printer: Printer, condition: str, value: Any) -> None:
        printer.write_line(
            self.RETURN_IF_TEMPLATE.format(
                condition=condition, value=self._value_literal(value)
            )
        )

    # ── byte dispatch hooks ──────────────────────────────────────

    def _open_switch(self, printer: Printer, position: int) -> None:
        pass

    def _open_case(self, printer: Printer, position: int, byte: int, index: int) -> None:
        raise NotImplementedError

    def _close_case(self, printer: Printer) -> None:
        pass

    def _close_switch(self, printer: Printer) -> None:
        pass

    # ── lowering ─────────────────────────────────────────────────

    def _lower_node(
        self, printer: Printer, node: TrieNode, position: int, known_length: int
    ) -> None:
        handler = self._LOWER_DISPATCH.get(type(node))
        assert handler is not None, f"not a key trie node: {node!r}"

        guarded = node.min_size > known_length
        if guarded:
            printer.write_line(
                self.LENGTH_GUARD_TEMPLATE.format(
                    size=self.SIZE_VAR, min_size=node.min_size
                )
            )
            printer.indent()
            known_length = node.min_size

        handler(printer, node, position, known_length)

        if guarded:
            printer.dedent()
            if self.BLOCK_CLOSE:
                printer.write_line(self.BLOCK_CLOSE)

    def _lower_run(
        self, printer: Printer, node: Run, position: int, known_length: int
    ) -> None:
        assert node.prefix, "run with an empty prefix"
        printer.write_line(
            self.IF_TEMPLATE.format(condition=self._range_equals(position, node.prefix))
        )
        printer.indent()
        self._lower_node(printer, node.rest, position + len(node.prefix), known_length)
        printer.dedent()
        if self.BLOCK_CLOSE:
            printer.write_line(self.BLOCK_CLOSE)

    def _lower_fanout(
        self, printer: Printer, node: Fanout, position: int, known_length: int
    ) -> None:
        branches = node.sorted_branches()
        assert branches, "fanout without branches"
        seen: set[int] = set()
        self._open_switch(printer, position)
        for index, (byte, child) in enumerate(branches):
            assert 0 <= byte <= 0xFF and byte not in seen, f"bad fanout byte {byte!r}"
            seen.add(byte)
            self._open_case(printer, position, byte, index)
            printer.indent()
            self._lower_node(printer, child, position + 1, known_length)
            printer.dedent()
            self._close_case(printer)
        self._close_switch(printer)

    def _lower_inline(
        self, printer: Printer, node: Inline, position: int, known_length: int
    ) -> None:
        # the bytes of node.key were checked by the enclosing conditions
        self._emit_return_if(printer, self._length_equals(len(node.key)), node.value)
        self._lower_node(printer, node.rest, position, known_length)

    def _lower_leaf(
        self, printer: Printer, node: Leaf, position: int, known_length: int
    ) -> None:
        conditions = [self._length_equals(len(node.key))]
        if len(node.suffix) == 1:
            conditions.append(self._byte_equals(position, node.suffix[0]))
        elif node.suffix:
            conditions.append(self._range_equals(position, node.suffix))
        self._emit_return_if(printer, self.AND_OPERATOR.join(conditions), node.value)

    def _lower_empty(
        self, printer: Printer, node: EmptyTrie, position: int, known_length: int
    ) -> None:
        pass
