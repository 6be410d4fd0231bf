"""File generators built on top of the key matcher."""

from __future__ import annotations

from .c2theme import generate_c2theme
from .header import generate_header
from .impl import generate_impl

__all__ = ["generate_c2theme", "generate_header", "generate_impl"]
