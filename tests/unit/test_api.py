"""Tests for the composable API functions in stylegen.api."""

from pathlib import Path

import pytest

from stylegen.api import (
    build_key_trie,
    generate_code,
    generate_theme,
    load_layout,
    load_theme,
    lower_key_matcher,
)
from stylegen.errors import MissingRuleError
from stylegen.run_types import GenerationStats, GeneratorConfig
from stylegen.trie import KeyTrie

LAYOUT_YAML = """\
layout:
  window:
    fields: [text, background]
"""

STYLE_CSS = """\
@chatterino {
    author: "nerix";
    icon-set: "dark";
}

:root {
    --fg: #eeeeee;
}

window {
    text: var(--fg);
    background: #101010;
}
"""


def _write_inputs(tmp_path: Path) -> tuple[Path, Path]:
    layout = tmp_path / "layout.yml"
    layout.write_text(LAYOUT_YAML, encoding="utf-8")
    style = tmp_path / "Dark.css"
    style.write_text(STYLE_CSS, encoding="utf-8")
    return layout, style


class TestBuildKeyTrie:
    def test_accepts_str_and_bytes(self):
        trie = build_key_trie([("abc", 0), (b"abd", 1)])
        assert isinstance(trie, KeyTrie)
        assert trie.get(b"abc") == 0
        assert trie.get(b"abd") == 1

    def test_later_pairs_overwrite(self):
        trie = build_key_trie([("abc", 0), ("abc", 5)])
        assert trie.get(b"abc") == 5


class TestLowerKeyMatcher:
    def test_cpp_by_default(self):
        text = lower_key_matcher([("forsen", 1), ("xqc", 2)])
        assert text.startswith("int getDataIndex(const QLatin1String &name) {\n")
        assert "\treturn -1;\n" in text

    def test_python_dialect_runs(self):
        text = lower_key_matcher([("forsen", 1), ("xqc", 2)], language="python")
        namespace: dict = {}
        exec(text, namespace)
        function = namespace["get_data_index"]
        assert function(b"xqc", 3) == 2
        assert function(b"xqd", 3) == -1

    def test_custom_indent(self):
        text = lower_key_matcher([("a", 0)], indent_unit="    ")
        assert "    auto size = name.size();\n" in text

    def test_unknown_language(self):
        with pytest.raises(ValueError):
            lower_key_matcher([("a", 0)], language="cobol")


class TestLoaders:
    def test_load_layout(self, tmp_path):
        layout_path, _ = _write_inputs(tmp_path)
        assert load_layout(layout_path).count_items() == 2

    def test_load_theme_flattens(self, tmp_path):
        _, style_path = _write_inputs(tmp_path)
        theme = load_theme(style_path)
        assert theme.meta.icon_set == "dark"
        assert sorted(theme.rules) == ["window.background", "window.text"]
        assert theme.rules["window.text"].to_argb_hex() == "#ffeeeeee"


class TestGenerateCode:
    def test_writes_header_and_impl(self, tmp_path):
        layout_path, style_path = _write_inputs(tmp_path)
        out = tmp_path / "out"
        stats = generate_code(layout_path, style_path, GeneratorConfig(output_dir=out))
        assert isinstance(stats, GenerationStats)
        assert stats.written == [out / "GeneratedTheme.cpp", out / "GeneratedTheme.hpp"]
        assert stats.color_count == 2
        assert stats.key_count == 2
        assert stats.min_key_length == len("window.text")
        impl = (out / "GeneratedTheme.cpp").read_text(encoding="utf-8")
        assert "this->colors_[0] = {238, 238, 238, 255};" in impl
        assert "this->colors_[1] = {16, 16, 16, 255};" in impl

    def test_timestamp(self, tmp_path):
        layout_path, style_path = _write_inputs(tmp_path)
        config = GeneratorConfig(output_dir=tmp_path, timestamp=True)
        stats = generate_code(layout_path, style_path, config)
        assert (tmp_path / "GeneratedTheme.timestamp").exists()
        assert stats.written[-1] == tmp_path / "GeneratedTheme.timestamp"

    def test_missing_rule(self, tmp_path):
        layout_path, style_path = _write_inputs(tmp_path)
        layout_path.write_text(
            "layout:\n  window:\n    fields: [text, border]\n", encoding="utf-8"
        )
        with pytest.raises(MissingRuleError, match="window.border"):
            generate_code(layout_path, style_path, GeneratorConfig(output_dir=tmp_path))

    def test_report(self, tmp_path):
        layout_path, style_path = _write_inputs(tmp_path)
        stats = generate_code(layout_path, style_path, GeneratorConfig(output_dir=tmp_path))
        report = stats.report()
        assert "Colors        : 2" in report
        assert "GeneratedTheme.hpp" in report


class TestGenerateTheme:
    def test_named_after_input(self, tmp_path):
        _, style_path = _write_inputs(tmp_path)
        out = tmp_path / "themes"
        stats = generate_theme(style_path, GeneratorConfig(output_dir=out, timestamp=True))
        assert stats.written == [out / "Dark.c2theme", out / "Dark.timestamp"]
        assert (out / "Dark.c2theme").read_text(encoding="utf-8").splitlines() == [
            "@meta",
            "author=nerix",
            "iconset=dark",
            "@colors",
            "window.background=#ff101010",
            "window.text=#ffeeeeee",
        ]
