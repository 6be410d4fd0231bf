"""Tests for the header, implementation and .c2theme generators."""

import pytest

from stylegen.errors import MissingRuleError
from stylegen.generators import generate_c2theme, generate_header, generate_impl
from stylegen.layout import Layout
from stylegen.printer import Printer
from stylegen.run_types import GeneratorConfig
from stylegen.theme_types import FlatTheme, Rgba, ThemeMeta

LAYOUT_YAML = """\
definitions:
  Pair:
    fields: [regular, hover]
layout:
  window:
    fields:
      text:
      background:
  tabs:
    fields:
      line: {ref: Pair}
"""

META = ThemeMeta(author="nerix", icon_set="light")


def _theme(**overrides) -> FlatTheme:
    rules = {
        "tabs.line.regular": Rgba(red=1, green=2, blue=3),
        "tabs.line.hover": Rgba(red=4, green=5, blue=6, alpha=7),
        "window.background": Rgba(red=0, green=0, blue=0),
        "window.text": Rgba(red=255, green=255, blue=255),
    }
    rules.update(overrides)
    return FlatTheme(meta=META, rules=rules)


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines()]


class TestGenerateHeader:
    def test_declares_structs_and_storage(self):
        p = Printer(indent_unit="  ")
        generate_header(p, Layout.parse(LAYOUT_YAML))
        text = p.getvalue()
        lines = _lines(text)
        assert lines[:5] == ["#pragma once", "", "#include <QColor>", "#include <QString>", ""]
        assert "namespace chatterino::theme {" in lines
        assert "struct Pair {" in lines
        assert "Pair line;" in lines
        assert "} tabs;" in lines
        assert "} window;" in lines
        assert "QColor colors_[4];" in lines
        assert "bool setColor(const QLatin1String &name, QColor color);" in lines
        assert text.endswith("}  // namespace chatterino::theme\n")

    def test_definitions_come_before_items(self):
        p = Printer()
        generate_header(p, Layout.parse(LAYOUT_YAML))
        text = p.getvalue()
        assert text.index("struct Pair {") < text.index("} tabs;") < text.index("} window;")

    def test_config_names(self):
        p = Printer()
        config = GeneratorConfig(class_name="MyTheme", namespace="app")
        generate_header(p, Layout.parse(LAYOUT_YAML), config)
        lines = _lines(p.getvalue())
        assert "class MyTheme {" in lines
        assert "MyTheme();" in lines
        assert "namespace app {" in lines


class TestGenerateImpl:
    def test_reset_writes_every_color(self):
        p = Printer()
        generate_impl(p, Layout.parse(LAYOUT_YAML), _theme())
        lines = _lines(p.getvalue())
        assert "this->colors_[0] = {1, 2, 3, 255};" in lines
        assert "this->colors_[1] = {4, 5, 6, 7};" in lines
        assert "this->colors_[2] = {0, 0, 0, 255};" in lines
        assert "this->colors_[3] = {255, 255, 255, 255};" in lines

    def test_apply_changes_wires_ids(self):
        p = Printer(indent_unit="  ")
        generate_impl(p, Layout.parse(LAYOUT_YAML), _theme())
        text = p.getvalue()
        assert "  this->tabs = {\n    {\n      d(0),\n      d(1),\n    },\n  };\n" in text
        assert "  this->window = {\n    d(2),\n    d(3),\n  };\n" in text

    def test_returns_trie_of_paths(self):
        trie = generate_impl(Printer(), Layout.parse(LAYOUT_YAML), _theme())
        assert dict(trie.items()) == {
            b"tabs.line.hover": 1,
            b"tabs.line.regular": 0,
            b"window.background": 2,
            b"window.text": 3,
        }

    def test_includes_key_matcher(self):
        p = Printer()
        generate_impl(p, Layout.parse(LAYOUT_YAML), _theme())
        lines = _lines(p.getvalue())
        assert lines[:4] == [
            '#include "GeneratedTheme.hpp"',
            "#include <QColor>",
            "#include <QString>",
            "#include <cstring>",
        ]
        assert "int getDataIndex(const QLatin1String &name);" in lines
        assert "int getDataIndex(const QLatin1String &name) {" in lines
        assert "auto idx = getDataIndex(name);" in lines
        assert "return -1;" in lines

    def test_missing_rule(self):
        theme = _theme()
        del theme.rules["window.text"]
        with pytest.raises(MissingRuleError, match="window.text"):
            generate_impl(Printer(), Layout.parse(LAYOUT_YAML), theme)


class TestGenerateC2Theme:
    def test_output(self):
        p = Printer()
        generate_c2theme(p, _theme())
        assert p.getvalue().splitlines() == [
            "@meta",
            "author=nerix",
            "iconset=light",
            "@colors",
            "tabs.line.hover=#07040506",
            "tabs.line.regular=#ff010203",
            "window.background=#ff000000",
            "window.text=#ffffffff",
        ]
