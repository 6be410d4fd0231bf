"""Theme code generator: layout + stylesheet in, C++ theme class out."""

from .trie import KeyTrie  # noqa: F401
from .api import (  # noqa: F401
    build_key_trie,
    lower_key_matcher,
    load_layout,
    load_theme,
    generate_code,
    generate_theme,
)
