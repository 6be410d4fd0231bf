"""Error types and source-annotated error rendering."""

from __future__ import annotations


class StyleGenError(Exception):
    """Base class for every error reported by stylegen."""


class ThemeParseError(StyleGenError):
    """A stylesheet could not be turned into a theme.

    ``line`` and ``column`` are 1-based; 0 means the location is unknown.
    """

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


class FlattenError(StyleGenError):
    """A ``var(--name)`` reference has no definition in ``:root``."""

    def __init__(self, name: str):
        super().__init__(f"'{name}' was used but never defined anywhere")
        self.name = name


class LayoutError(StyleGenError):
    """The layout file is malformed."""


class LayoutSchemaError(LayoutError):
    def __init__(self, detail: str):
        super().__init__(f"Deserialization error: {detail}")


class RefNotFoundError(LayoutError):
    def __init__(self, name: str):
        super().__init__(f"Couldn't find definition for '{name}'")
        self.name = name


class RefAndFieldsError(LayoutError):
    def __init__(self, name: str):
        super().__init__(f"Found struct with both 'ref' and 'fields' in {name}")
        self.name = name


class EmptyStructError(LayoutError):
    def __init__(self, name: str):
        super().__init__(f"Found struct with neither 'ref' nor 'fields' in {name}")
        self.name = name


class NotStructError(LayoutError):
    def __init__(self, section: str, name: str):
        super().__init__(f"{section} of {name} isn't a struct")
        self.name = name


class CyclicRefError(LayoutError):
    def __init__(self, name: str):
        super().__init__(f"Definition of '{name}' references itself")
        self.name = name


class MissingRuleError(StyleGenError):
    """A layout field has no color in the default style."""

    def __init__(self, path: str):
        super().__init__(f"no rule for: {path}")
        self.path = path


# ── source rendering ─────────────────────────────────────────────


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


def format_error_with_source(
    source_id: str, source: str, message: str, line: int, column: int
) -> str:
    """Render *message* under the offending source line.

    Shows the previous line, the error line and a marker under *column*::

        Dark.css:
            3│ messages {
            4│     foo: nope;
                        ╰─► Expected a color or var(..)

    Falls back to ``[source @ line L, column C] message`` when the location
    does not point into *source*.
    """
    lines = source.split("\n")
    if line < 2 or line > len(lines) or column < 1:
        return f"[{source_id} @ line {line}, column {column}] {message}"

    previous = _strip_cr(lines[line - 2])
    current = _strip_cr(lines[line - 1])
    marker = " " * (5 + 2 + column - 1) + f"╰─► {message}"
    return "\n".join(
        [
            f"{source_id}:",
            f"{line - 1:>5}│ {previous}",
            f"{line:>5}│ {current}",
            marker,
        ]
    )
