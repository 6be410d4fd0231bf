"""Theme model — colors, nested rules and their flattened form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import FlattenError
from . import constants


class Rgba(BaseModel):
    model_config = ConfigDict(frozen=True)

    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)
    alpha: int = Field(default=255, ge=0, le=255)

    def to_argb_hex(self) -> str:
        return f"#{self.alpha:02x}{self.red:02x}{self.green:02x}{self.blue:02x}"


@dataclass(frozen=True)
class ThemeMeta:
    author: str
    icon_set: str


@dataclass(frozen=True)
class ColorRef:
    """A ``var(--name)`` reference to a color defined in ``:root``."""

    name: str


RuleValue = Union[Rgba, ColorRef]
Rule = Union[Rgba, ColorRef, dict[str, "Rule"]]
RuleMap = dict[str, Rule]


@dataclass
class FlatTheme:
    meta: ThemeMeta
    rules: dict[str, Rgba] = field(default_factory=dict)


@dataclass
class Theme:
    meta: ThemeMeta
    colors: dict[str, Rgba] = field(default_factory=dict)
    rules: RuleMap = field(default_factory=dict)

    def flatten(self) -> FlatTheme:
        """Resolve references and key every color by its dotted path."""
        flat = FlatTheme(meta=self.meta)
        _flatten_into(flat.rules, "", self.rules, self.colors)
        return flat


def _flatten_into(
    out: dict[str, Rgba], prefix: str, rules: RuleMap, colors: dict[str, Rgba]
) -> None:
    for name, rule in rules.items():
        path = combine_path(prefix, name)
        if isinstance(rule, dict):
            _flatten_into(out, path, rule, colors)
        elif isinstance(rule, ColorRef):
            if rule.name not in colors:
                raise FlattenError(rule.name)
            out[path] = colors[rule.name]
        else:
            out[path] = rule


def combine_path(prefix: str, name: str) -> str:
    """Append *name* to the dotted *prefix*, normalizing it.

    ``-`` and ``_`` are dropped and ASCII letters lowercased, so
    ``combine_path("messages", "Text_Colors")`` is ``"messages.textcolors"``.
    """
    suffix = "".join(
        c.lower() if c.isascii() else c
        for c in name
        if c not in constants.PATH_DROPPED_CHARS
    )
    if not prefix:
        return suffix
    return f"{prefix}{constants.PATH_SEPARATOR}{suffix}"
