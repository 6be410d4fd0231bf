"""CppMatcher — key trie → C++ ``getDataIndex`` lowering."""

from __future__ import annotations

from ._base import BaseMatcher
from ..printer import Printer
from .. import constants

_ESCAPED = {ord("\\"): "\\\\", ord("\n"): "\\n", ord("\t"): "\\t", ord("\r"): "\\r"}


def _escape_byte(byte: int, quote: str) -> str:
    if byte in _ESCAPED:
        return _ESCAPED[byte]
    if byte == ord(quote):
        return "\\" + quote
    if 0x20 <= byte < 0x7F:
        return chr(byte)
    # octal escapes stop after three digits, hex escapes would not
    return f"\\{byte:03o}"


def c_string_literal(data: bytes) -> str:
    return '"' + "".join(_escape_byte(b, '"') for b in data) + '"'


def c_char_literal(byte: int) -> str:
    return "'" + _escape_byte(byte, "'") + "'"


class CppMatcher(BaseMatcher):
    """Prints ``int getDataIndex(const QLatin1String &name)``."""

    FUNCTION_NAME = constants.CPP_MATCHER_FUNCTION
    PARAMETERS = "const QLatin1String &name"

    RANGE_EQUALS_TEMPLATE = (
        "std::memcmp({data} + {position}, {literal}, {length}) == 0"
    )

    def declaration(self) -> str:
        return f"int {self.FUNCTION_NAME}({self.PARAMETERS});"

    def _emit_signature(self, printer: Printer) -> None:
        printer.write_line(f"int {self.FUNCTION_NAME}({self.PARAMETERS}) {{")

    def _emit_prologue(self, printer: Printer) -> None:
        printer.write_line(f"auto {self.SIZE_VAR} = name.size();")
        printer.write_line(f"auto {self.DATA_VAR} = name.data();")

    def _emit_epilogue(self, printer: Printer) -> None:
        printer.write_line("}")

    def _byte_literal(self, byte: int) -> str:
        return c_char_literal(byte)

    def _bytes_literal(self, data: bytes) -> str:
        return c_string_literal(data)

    def _open_switch(self, printer: Printer, position: int) -> None:
        printer.write_line(f"switch ({self.DATA_VAR}[{position}]) {{")

    def _open_case(self, printer: Printer, position: int, byte: int, index: int) -> None:
        printer.write_line(f"case {c_char_literal(byte)}: {{")

    def _close_case(self, printer: Printer) -> None:
        printer.write_line("}")
        printer.write_line("break;")

    def _close_switch(self, printer: Printer) -> None:
        printer.write_line("}")
