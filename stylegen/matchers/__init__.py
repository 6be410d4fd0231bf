"""Key matcher dialects — one lowering per target language."""

from __future__ import annotations

import importlib

from ._base import BaseMatcher
from .cpp import CppMatcher
from .. import constants

# Lazy imports keep unused dialects out of the startup path
_MATCHER_CLASSES: dict[str, str] = {
    constants.MATCHER_CPP: "cpp.CppMatcher",
    constants.MATCHER_PYTHON: "python.PythonMatcher",
}


def get_matcher(language: str = constants.DEFAULT_MATCHER) -> BaseMatcher:
    """Instantiate the key matcher for *language*.

    Raises ``ValueError`` if *language* has no registered matcher.
    """
    target = _MATCHER_CLASSES.get(language)
    if target is None:
        raise ValueError(f"Unsupported matcher language: {language}")
    module_name, class_name = target.split(".")
    mod = importlib.import_module(f".{module_name}", package=__package__)
    cls = getattr(mod, class_name)
    return cls()


SUPPORTED_MATCHER_LANGUAGES: tuple[str, ...] = tuple(_MATCHER_CLASSES.keys())

__all__ = [
    "BaseMatcher",
    "CppMatcher",
    "get_matcher",
    "SUPPORTED_MATCHER_LANGUAGES",
]
