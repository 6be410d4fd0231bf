"""PythonMatcher — key trie → Python ``get_data_index`` lowering."""

from __future__ import annotations

from typing import Any

from ._base import BaseMatcher
from ..printer import Printer
from .. import constants


class PythonMatcher(BaseMatcher):
    """Prints ``def get_data_index(data: bytes, size: int) -> int``.

    Byte dispatch becomes an ``if``/``elif`` chain; a failed branch falls off
    the end of the chain just like a ``break`` out of a C ``switch``.
    """

    FUNCTION_NAME = constants.PYTHON_MATCHER_FUNCTION

    LENGTH_GUARD_TEMPLATE = "if {size} >= {min_size}:"
    LENGTH_EQUALS_TEMPLATE = "{size} == {length}"
    BYTE_EQUALS_TEMPLATE = "{data}[{position}] == {byte}"
    RANGE_EQUALS_TEMPLATE = "{data}[{position}:{end}] == {literal}"
    IF_TEMPLATE = "if {condition}:"
    RETURN_TEMPLATE = "return {value}"
    AND_OPERATOR = " and "
    BLOCK_CLOSE = ""

    def _emit_signature(self, printer: Printer) -> None:
        printer.write_line(
            f"def {self.FUNCTION_NAME}({self.DATA_VAR}: bytes, {self.SIZE_VAR}: int) -> int:"
        )

    def _byte_literal(self, byte: int) -> str:
        return f"0x{byte:02x}"

    def _emit_return_if(self, printer: Printer, condition: str, value: Any) -> None:
        printer.write_line(f"if {condition}:")
        printer.indent()
        printer.write_line(self.RETURN_TEMPLATE.format(value=self._value_literal(value)))
        printer.dedent()

    def _open_case(self, printer: Printer, position: int, byte: int, index: int) -> None:
        keyword = "if" if index == 0 else "elif"
        printer.write_line(f"{keyword} {self._byte_equals(position, byte)}:")
