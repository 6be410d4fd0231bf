"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

NOT_FOUND = -1

INDENT_UNIT = "\t"

MATCHER_CPP = "cpp"
MATCHER_PYTHON = "python"
DEFAULT_MATCHER = MATCHER_CPP

CPP_MATCHER_FUNCTION = "getDataIndex"
PYTHON_MATCHER_FUNCTION = "get_data_index"

DEFAULT_LAYOUT_FILE = "layout.yml"
DEFAULT_OUTPUT_DIR = "."
GENERATED_BASENAME = "GeneratedTheme"
DEFAULT_THEME_BASENAME = "ChatterinoTheme"

HEADER_SUFFIX = ".hpp"
IMPL_SUFFIX = ".cpp"
C2THEME_SUFFIX = ".c2theme"
TIMESTAMP_SUFFIX = ".timestamp"

THEME_CLASS_NAME = "GeneratedTheme"
THEME_NAMESPACE = "chatterino::theme"

META_AT_RULE = "chatterino"
NEST_AT_RULE = "nest"
ROOT_PSEUDO_CLASS = "root"
VAR_FUNCTION = "var"

META_AUTHOR = "author"
META_ICON_SET = "icon-set"

PATH_SEPARATOR = "."
PATH_DROPPED_CHARS = frozenset("-_")

STYLESHEET_LANGUAGE = "css"
ERROR_NODE_TYPE = "ERROR"
