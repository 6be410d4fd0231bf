"""GeneratedTheme.hpp — class declaration mirroring the layout."""

from __future__ import annotations

from ..layout import FieldItem, Layout, LayoutItem, RefItem
from ..printer import Printer
from ..run_types import GeneratorConfig


def generate_header(
    p: Printer, layout: Layout, config: GeneratorConfig = GeneratorConfig()
) -> None:
    p.write_lines(["#pragma once", "", "#include <QColor>", "#include <QString>", ""])

    p.write_line(f"namespace {config.namespace} {{")
    p.write_line(f"class {config.class_name} {{")
    p.write_line("public:")
    p.indent()

    for name, definition in layout.definitions.items():
        with p.block(f"struct {name} {{", "};"):
            for item in definition.fields:
                _write_struct_field(p, item)

    for name, fields in layout.items.items():
        _write_struct(p, name, fields)

    p.write_line(f"{config.class_name}();")
    p.dedent()
    p.write_line("")
    p.write_line("protected:")
    p.indent()
    p.write_line("bool setColor(const QLatin1String &name, QColor color);")
    p.write_line("void reset();")
    p.write_line("void applyChanges();")
    p.dedent()
    p.write_line("")
    p.write_line("private:")
    p.indent()
    p.write_line(f"QColor colors_[{layout.count_items()}];")
    p.dedent()

    p.write_line("};")
    p.write_line(f"}}  // namespace {config.namespace}")


def _write_struct_field(p: Printer, item: LayoutItem) -> None:
    if isinstance(item, RefItem):
        p.write_line(f"{item.referenced} {item.field_name};")
    elif isinstance(item, FieldItem):
        p.write_line(f"QColor {item.name};")
    else:
        _write_struct(p, item.field_name, item.fields)


def _write_struct(p: Printer, struct_name: str, fields: list[LayoutItem]) -> None:
    p.write_line("")
    with p.block("struct {", f"}} {struct_name};"):
        for item in fields:
            _write_struct_field(p, item)
