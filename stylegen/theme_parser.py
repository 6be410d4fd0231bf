"""ThemeParser — tree-sitter CSS stylesheet → Theme.

A theme stylesheet looks like::

    @chatterino {
        author: "nerix";
        icon-set: "light";
    }

    :root {
        --accent: #ff8000;
    }

    messages {
        disabled: rgba(0, 0, 0, 0.6);
        @nest text-colors {
            regular: var(--accent);
        }
    }

Declarations that cannot be understood are logged and skipped; structural
problems (duplicate blocks, missing metadata) raise ``ThemeParseError``.
"""

from __future__ import annotations

import colorsys
import logging
from typing import Callable

from .errors import ThemeParseError
from .named_colors import NAMED_COLORS
from .parser import StylesheetParser
from .theme_types import ColorRef, Rgba, RuleMap, RuleValue, Theme, ThemeMeta
from . import constants

logger = logging.getLogger(__name__)

_EXPECTED_COLOR = "Expected a color or var(..)"


class ThemeParser:
    """Walks a tree-sitter CSS tree and collects meta, root colors and rules."""

    COMMENT_TYPES: frozenset[str] = frozenset({"comment", "js_comment"})
    RGB_FUNCTIONS: frozenset[str] = frozenset({"rgb", "rgba"})
    HSL_FUNCTIONS: frozenset[str] = frozenset({"hsl", "hsla"})

    def __init__(self):
        self._source: bytes = b""
        self._meta: ThemeMeta | None = None
        self._colors: dict[str, Rgba] | None = None
        self._rules: RuleMap = {}
        self._TOP_LEVEL_DISPATCH: dict[str, Callable] = {
            "at_rule": self._parse_top_level_at_rule,
            "rule_set": self._parse_rule_set,
        }

    # ── entry point ──────────────────────────────────────────────

    def parse(self, tree, source: bytes) -> Theme:
        self._source = source
        self._meta = None
        self._colors = None
        self._rules = {}

        root = tree.root_node
        for node in root.named_children:
            # syntax errors were already reported by StylesheetParser
            if node.type in self.COMMENT_TYPES or node.type == constants.ERROR_NODE_TYPE:
                continue
            handler = self._TOP_LEVEL_DISPATCH.get(node.type)
            if handler is None:
                self._warn_invalid(node, f"Unexpected {node.type}")
                continue
            handler(node)

        if self._meta is None:
            raise ThemeParseError(
                "Expected a @chatterino metadata block", *self._end_location(root)
            )
        return Theme(meta=self._meta, colors=self._colors or {}, rules=self._rules)

    # ── helpers ──────────────────────────────────────────────────

    def _node_text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def _location(self, node) -> tuple[int, int]:
        return node.start_point[0] + 1, node.start_point[1] + 1

    def _end_location(self, node) -> tuple[int, int]:
        return node.end_point[0] + 1, node.end_point[1] + 1

    def _child_of_type(self, node, node_type: str):
        return next((c for c in node.children if c.type == node_type), None)

    def _error(self, message: str, node) -> ThemeParseError:
        return ThemeParseError(message, *self._location(node))

    def _warn_invalid(self, node, reason: str) -> None:
        line, column = self._location(node)
        logger.warning(
            "Error parsing '%s' (line %d, column %d): %s",
            self._node_text(node).strip(),
            line,
            column,
            reason,
        )

    def _at_keyword(self, node) -> str:
        keyword = self._child_of_type(node, "at_keyword")
        if keyword is None:
            return ""
        return self._node_text(keyword).lstrip("@").lower()

    def _at_rule_prelude(self, node) -> str:
        parts = [
            self._node_text(c)
            for c in node.named_children
            if c.type not in ("at_keyword", "block") and c.type not in self.COMMENT_TYPES
        ]
        return " ".join(parts).strip()

    def _declaration_parts(self, node) -> tuple[str, list]:
        name_node = self._child_of_type(node, "property_name")
        name = self._node_text(name_node) if name_node is not None else ""
        values = [
            c
            for c in node.named_children
            if c.type != "property_name" and c.type not in self.COMMENT_TYPES
        ]
        return name, values

    def _block_items(self, block):
        for child in block.named_children:
            if child.type in self.COMMENT_TYPES:
                continue
            if child.has_error or child.type == constants.ERROR_NODE_TYPE:
                continue
            yield child

    # ── top-level items ──────────────────────────────────────────

    def _parse_top_level_at_rule(self, node) -> None:
        keyword = self._at_keyword(node)
        if keyword != constants.META_AT_RULE:
            self._warn_invalid(node, f"Invalid @-rule ({keyword})")
            return
        block = self._child_of_type(node, "block")
        if block is None:
            self._warn_invalid(node, "@-rule body is invalid")
            return

        meta = self._parse_meta_block(node, block)
        if self._meta is not None:
            raise self._error("Found duplicate @chatterino metadata block", node)
        self._meta = meta

    def _parse_rule_set(self, node) -> None:
        selectors = self._child_of_type(node, "selectors")
        block = self._child_of_type(node, "block")
        if selectors is None or block is None:
            self._warn_invalid(node, "Qualified rule is invalid")
            return

        selector_text = self._node_text(selectors).strip()
        if selector_text.lower() == f":{constants.ROOT_PSEUDO_CLASS}":
            colors = self._parse_root_block(block)
            if self._colors is not None:
                raise self._error("Found duplicate :root block", node)
            self._colors = colors
            return

        named = selectors.named_children
        if len(named) != 1 or named[0].type != "tag_name":
            self._warn_invalid(node, f"Expected an identifier, found '{selector_text}'")
            return

        name = self._node_text(named[0])
        rules = self._parse_rule_block(block)
        if name in self._rules:
            raise self._error(f"Found duplicate block ('{name}')", node)
        self._rules[name] = rules

    # ── blocks ───────────────────────────────────────────────────

    def _parse_meta_block(self, node, block) -> ThemeMeta:
        found: dict[str, str] = {}
        for item in self._block_items(block):
            if item.type != "declaration":
                self._warn_invalid(item, f"Unexpected {item.type}")
                continue
            name, values = self._declaration_parts(item)
            key = name.lower()
            if key not in (constants.META_AUTHOR, constants.META_ICON_SET):
                self._warn_invalid(item, f"Unexpected {name}")
                continue
            if len(values) != 1 or values[0].type != "string_value":
                self._warn_invalid(item, "Expected a string")
                continue
            found[key] = _unquote(self._node_text(values[0]))

        for required in (constants.META_AUTHOR, constants.META_ICON_SET):
            if required not in found:
                raise self._error(f"Missing '{required}' in meta", node)
        return ThemeMeta(
            author=found[constants.META_AUTHOR],
            icon_set=found[constants.META_ICON_SET],
        )

    def _parse_root_block(self, block) -> dict[str, Rgba]:
        colors: dict[str, Rgba] = {}
        for item in self._block_items(block):
            if item.type != "declaration":
                self._warn_invalid(item, f"Unexpected {item.type}")
                continue
            name, values = self._declaration_parts(item)
            try:
                colors[name] = self._parse_color(values, item)
            except ThemeParseError as exc:
                self._warn_invalid(item, exc.message)
        return colors

    def _parse_rule_block(self, block) -> RuleMap:
        rules: RuleMap = {}
        for item in self._block_items(block):
            if item.type == "declaration":
                name, values = self._declaration_parts(item)
                try:
                    rules[name] = self._parse_rule_value(values, item)
                except ThemeParseError as exc:
                    self._warn_invalid(item, exc.message)
            elif item.type == "at_rule":
                self._parse_nested_at_rule(item, rules)
            else:
                self._warn_invalid(item, f"Unexpected {item.type}")
        return rules

    def _parse_nested_at_rule(self, node, rules: RuleMap) -> None:
        keyword = self._at_keyword(node)
        if keyword != constants.NEST_AT_RULE:
            self._warn_invalid(node, f"Invalid @-rule ({keyword})")
            return
        name = self._at_rule_prelude(node)
        block = self._child_of_type(node, "block")
        if not name or " " in name or block is None:
            self._warn_invalid(node, "@-rule body is invalid")
            return
        rules[name] = self._parse_rule_block(block)

    # ── values ───────────────────────────────────────────────────

    def _parse_rule_value(self, values: list, node) -> RuleValue:
        if len(values) == 1 and values[0].type == "call_expression":
            function = self._child_of_type(values[0], "function_name")
            if function is not None and (
                self._node_text(function).lower() == constants.VAR_FUNCTION
            ):
                return self._parse_var(values[0])
        return self._parse_color(values, node)

    def _parse_var(self, call) -> ColorRef:
        arguments = self._child_of_type(call, "arguments")
        names = arguments.named_children if arguments is not None else []
        if not names:
            raise self._error(_EXPECTED_COLOR, call)
        # TODO: support the fallback argument of var(--name, fallback)
        return ColorRef(name=self._node_text(names[0]).strip())

    def _parse_color(self, values: list, node) -> Rgba:
        if len(values) != 1:
            raise self._error(_EXPECTED_COLOR, node)
        value = values[0]
        text = self._node_text(value).strip()

        if value.type == "color_value":
            return parse_hex_color(text, self._location(value))
        if value.type == "call_expression":
            return self._parse_color_function(value)
        if value.type == "plain_value":
            lowered = text.lower()
            if lowered == "currentcolor":
                raise self._error("'currentColor' isn't supported", value)
            if lowered in NAMED_COLORS:
                return parse_hex_color(NAMED_COLORS[lowered], self._location(value))
        raise self._error(_EXPECTED_COLOR, value)

    def _parse_color_function(self, call) -> Rgba:
        """``rgb()``/``rgba()``/``hsl()``/``hsla()``, comma or space separated,
        with an optional ``/ alpha``."""
        function = self._child_of_type(call, "function_name")
        arguments = self._child_of_type(call, "arguments")
        name = self._node_text(function).lower() if function is not None else ""
        if arguments is None or name not in self.RGB_FUNCTIONS | self.HSL_FUNCTIONS:
            raise self._error(_EXPECTED_COLOR, call)

        channels, alpha_text = _split_color_arguments(self._node_text(arguments))
        if len(channels) != 3:
            raise self._error(f"Expected 3 or 4 arguments to {name}()", call)

        try:
            if name in self.HSL_FUNCTIONS:
                red, green, blue = _hsl_to_rgb(*channels)
            else:
                red, green, blue = (_channel(c) for c in channels)
            alpha = _alpha(alpha_text) if alpha_text is not None else 255
        except ValueError as exc:
            raise self._error(f"Invalid {name}() argument: {exc}", call) from exc
        return Rgba(red=red, green=green, blue=blue, alpha=alpha)


# ── value helpers ────────────────────────────────────────────────


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return text


def _clamp(value: float) -> int:
    return max(0, min(255, round(value)))


def _channel(text: str) -> int:
    if text.endswith("%"):
        return _clamp(float(text[:-1]) * 255 / 100)
    return _clamp(float(text))


def _alpha(text: str) -> int:
    if text.endswith("%"):
        return _clamp(float(text[:-1]) * 255 / 100)
    return _clamp(float(text) * 255)


def _split_color_arguments(text: str) -> tuple[list[str], str | None]:
    """Split ``(a, b, c, d)`` or ``(a b c / d)`` into channels and alpha."""
    body = text.strip()
    if body.startswith("(") and body.endswith(")"):
        body = body[1:-1]
    alpha = None
    if "/" in body:
        body, alpha = body.split("/", 1)
        alpha = alpha.strip()
    parts = body.replace(",", " ").split()
    if alpha is None and len(parts) == 4:
        alpha = parts.pop()
    return parts, alpha


def _fraction(text: str) -> float:
    if not text.endswith("%"):
        raise ValueError(f"expected a percentage, got '{text}'")
    return max(0.0, min(1.0, float(text[:-1]) / 100))


def _hsl_to_rgb(hue: str, saturation: str, lightness: str) -> tuple[int, int, int]:
    if hue.endswith("deg"):
        hue = hue[:-3]
    h = float(hue) % 360 / 360
    rgb = colorsys.hls_to_rgb(h, _fraction(lightness), _fraction(saturation))
    return tuple(_clamp(c * 255) for c in rgb)


def parse_hex_color(text: str, location: tuple[int, int] = (0, 0)) -> Rgba:
    """Parse ``#rgb``, ``#rgba``, ``#rrggbb`` or ``#rrggbbaa``."""
    digits = text[1:] if text.startswith("#") else text
    if len(digits) in (3, 4):
        digits = "".join(d * 2 for d in digits)
    if len(digits) not in (6, 8):
        raise ThemeParseError(f"Invalid hex color '{text}'", *location)
    try:
        channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
    except ValueError as exc:
        raise ThemeParseError(f"Invalid hex color '{text}'", *location) from exc
    if len(channels) == 3:
        channels.append(255)
    red, green, blue, alpha = channels
    return Rgba(red=red, green=green, blue=blue, alpha=alpha)


def parse_theme(source: str, parser: StylesheetParser | None = None) -> Theme:
    """Parse stylesheet *source* into a :class:`Theme`."""
    tree = (parser or StylesheetParser()).parse(source)
    return ThemeParser().parse(tree, source.encode("utf-8"))
