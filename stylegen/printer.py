"""Indentation-aware text writer used by all code generators."""

from __future__ import annotations

import io
from contextlib import contextmanager
from typing import Iterator, TextIO

from . import constants


class Printer:
    """Writes lines to *writer*, prefixed with the current indentation.

    When no writer is given the output is collected in memory and can be read
    back with :meth:`getvalue`.
    """

    def __init__(
        self, writer: TextIO | None = None, indent_unit: str = constants.INDENT_UNIT
    ):
        self._writer: TextIO = writer if writer is not None else io.StringIO()
        self._indent_unit = indent_unit
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def indent(self) -> None:
        self._depth += 1

    def dedent(self) -> None:
        if self._depth == 0:
            raise RuntimeError("Cannot dedent - indent was 0")
        self._depth -= 1

    def begin_line(self) -> None:
        self._writer.write(self._indent_unit * self._depth)

    def write(self, text: str) -> None:
        self._writer.write(text)

    def write_line(self, line: str = "") -> None:
        if line:
            self.begin_line()
            self._writer.write(line)
        self._writer.write("\n")

    def write_lines(self, lines: list[str]) -> None:
        for line in lines:
            self.write_line(line)

    @contextmanager
    def block(self, open_line: str, close_line: str = "}") -> Iterator[None]:
        """Write *open_line*, indent the body, then write *close_line*."""
        self.write_line(open_line)
        self.indent()
        try:
            yield
        finally:
            self.dedent()
            if close_line:
                self.write_line(close_line)

    def getvalue(self) -> str:
        if not isinstance(self._writer, io.StringIO):
            raise TypeError("getvalue() needs an in-memory printer")
        return self._writer.getvalue()
