"""GeneratedTheme.cpp — defaults, struct wiring, and the name → id matcher."""

from __future__ import annotations

import logging

from ..errors import MissingRuleError
from ..layout import FlatField, FlatItem, FlatStruct, Layout
from ..matchers.cpp import CppMatcher
from ..printer import Printer
from ..run_types import GeneratorConfig
from ..theme_types import FlatTheme, combine_path
from ..trie import KeyTrie

logger = logging.getLogger(__name__)


def generate_impl(
    p: Printer,
    layout: Layout,
    theme: FlatTheme,
    config: GeneratorConfig = GeneratorConfig(),
) -> KeyTrie:
    """Print the implementation file; return the key trie behind ``setColor``."""
    matcher = CppMatcher()
    cls = config.class_name
    flat_layout = layout.flatten()

    p.write_lines(
        [
            f'#include "{config.basename}.hpp"',
            "#include <QColor>",
            "#include <QString>",
            "#include <cstring>",
            "",
        ]
    )

    with p.block("namespace {", "} //  namespace"):
        p.write_line(matcher.declaration())

    p.write_line(f"namespace {config.namespace} {{")

    with p.block(f"{cls}::{cls}() {{"):
        p.write_line("this->reset();")
        p.write_line("this->applyChanges();")

    with p.block(f"void {cls}::applyChanges() {{"):
        p.write_line(
            "const auto d = [this](size_t i) -> const QColor& "
            "{ return this->colors_[i]; };"
        )
        for struct in flat_layout:
            with p.block(f"this->{struct.name} = {{", "};"):
                for item in struct.fields:
                    _print_field(p, item)
        p.write_line("this->reset();")

    paths: list[tuple[str, int]] = []
    with p.block(f"void {cls}::reset() {{"):
        for struct in flat_layout:
            prefix = combine_path("", struct.name)
            for item in struct.fields:
                _reset_field(p, paths, prefix, theme, item)

    trie = KeyTrie()
    for path, color_id in paths:
        trie.insert(path.encode("utf-8"), color_id)
    logger.debug("Collected %d color paths for the key matcher", len(paths))

    with p.block(f"bool {cls}::setColor(const QLatin1String &name, QColor color) {{"):
        p.write_line(f"auto idx = {matcher.FUNCTION_NAME}(name);")
        p.write_line("if (idx < 0) return false;")
        p.write_line("this->colors_[idx] = color;")
        p.write_line("return true;")

    p.write_line(f"}} //  namespace {config.namespace}")

    p.write_line("namespace {")
    matcher.emit_function(p, trie)
    p.write_line("} //  namespace")
    return trie


def _print_field(p: Printer, item: FlatItem) -> None:
    if isinstance(item, FlatField):
        p.write_line(f"d({item.id}),")
        return
    with p.block("{", "},"):
        for field in item.fields:
            _print_field(p, field)


def _reset_field(
    p: Printer,
    paths: list[tuple[str, int]],
    prefix: str,
    theme: FlatTheme,
    item: FlatItem,
) -> None:
    if isinstance(item, FlatStruct):
        nested = combine_path(prefix, item.name)
        for field in item.fields:
            _reset_field(p, paths, nested, theme, field)
        return

    path = combine_path(prefix, item.name)
    color = theme.rules.get(path)
    if color is None:
        raise MissingRuleError(path)
    p.write_line(
        f"this->colors_[{item.id}] = "
        f"{{{color.red}, {color.green}, {color.blue}, {color.alpha}}};"
    )
    paths.append((path, item.id))
