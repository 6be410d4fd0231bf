"""<name>.c2theme — flat ``path=#aarrggbb`` theme file."""

from __future__ import annotations

from ..printer import Printer
from ..theme_types import FlatTheme


def generate_c2theme(p: Printer, theme: FlatTheme) -> None:
    p.write_line("@meta")
    p.write_line(f"author={theme.meta.author}")
    p.write_line(f"iconset={theme.meta.icon_set}")
    p.write_line("@colors")
    for path in sorted(theme.rules):
        p.write_line(f"{path}={theme.rules[path].to_argb_hex()}")
