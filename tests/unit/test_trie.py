"""Tests for the key trie builder: exact shapes, lookups and min_size."""

import pytest

from stylegen.trie import KeyTrie, Overlap, PrefixMatch, count_nodes, match_prefix
from stylegen.trie_types import EmptyTrie, Fanout, Inline, Leaf, Run

THEME_PATHS = [
    "colors.accentcolor",
    "messages.backgrounds.regular",
    "messages.backgrounds.alternate",
    "messages.disabled",
    "messages.highlightanimationend",
    "messages.highlightanimationstart",
    "messages.selection",
    "messages.textcolors.regular",
    "messages.textcolors.caret",
    "messages.textcolors.link",
    "messages.textcolors.system",
    "messages.textcolors.chatplaceholder",
    "scrollbars.background",
    "scrollbars.highlights.highlight",
    "scrollbars.highlights.subscription",
    "scrollbars.thumb",
    "scrollbars.thumbselected",
    "splits.background",
    "splits.droppreview",
    "splits.droppreviewborder",
    "splits.droptargetrect",
    "splits.droptargetrectborder",
    "splits.header.border",
    "splits.header.focusedborder",
    "splits.header.background",
    "splits.header.focusedbackground",
    "splits.header.text",
    "splits.header.focusedtext",
    "splits.input.border",
    "splits.input.background",
    "splits.input.selection",
    "splits.input.focusedline",
    "splits.input.text",
    "splits.messageseperator",
    "splits.resizehandle",
    "splits.resizehandlebackground",
    "tabs.border",
    "tabs.dividerline",
    "tabs.highlighted.backgrounds.regular",
    "tabs.highlighted.backgrounds.hover",
    "tabs.highlighted.text",
    "tabs.selected.backgrounds.regular",
    "tabs.selected.line.unfocused",
    "tabs.selected.text",
    "tooltip.text",
    "tooltip.background",
    "window.text",
    "window.background",
    "window.borderunfocused",
    "window.borderfocused",
]


def _leaf(suffix: bytes, key: bytes, value: int) -> Leaf:
    return Leaf(suffix=suffix, key=key, value=value)


def _trie(*pairs) -> KeyTrie:
    trie = KeyTrie()
    for key, value in pairs:
        trie.insert(key, value)
    return trie


class TestMatchPrefix:
    def test_diverge_at_zero(self):
        assert match_prefix(b"abc", b"xbc") == PrefixMatch(Overlap.DIVERGE, 0)

    def test_diverge_after_shared_bytes(self):
        assert match_prefix(b"abc", b"abx") == PrefixMatch(Overlap.DIVERGE, 2)

    def test_key_longer(self):
        assert match_prefix(b"ab", b"abc") == PrefixMatch(Overlap.KEY_LONGER, 2)

    def test_key_shorter(self):
        assert match_prefix(b"abc", b"a") == PrefixMatch(Overlap.KEY_SHORTER, 1)

    def test_equal(self):
        assert match_prefix(b"abc", b"abc") == PrefixMatch(Overlap.EQUAL, 3)

    def test_both_empty_are_equal(self):
        assert match_prefix(b"", b"").overlap is Overlap.EQUAL


class TestInsertShapes:
    def test_empty_trie(self):
        trie = KeyTrie()
        assert trie.root == EmptyTrie()
        assert trie.min_size() == 0

    def test_first_key_becomes_leaf(self):
        trie = _trie((b"forsen", 1))
        assert trie.root == _leaf(b"forsen", b"forsen", 1)

    def test_basic_insert_sequence(self):
        trie = _trie((b"forsen", 1), (b"xqc", 2))
        assert trie.root == Fanout(
            min_size=3,
            branches={
                ord("f"): _leaf(b"orsen", b"forsen", 1),
                ord("x"): _leaf(b"qc", b"xqc", 2),
            },
        )

        trie.insert(b"forsenL", 3)
        assert trie.root == Fanout(
            min_size=3,
            branches={
                ord("f"): Run(
                    prefix=b"orsen",
                    min_size=6,
                    rest=Inline(
                        key=b"forsen", value=1, rest=_leaf(b"L", b"forsenL", 3)
                    ),
                ),
                ord("x"): _leaf(b"qc", b"xqc", 2),
            },
        )

        trie.insert(b"for", 4)
        assert trie.root.branches[ord("f")] == Run(
            prefix=b"or",
            min_size=3,
            rest=Inline(
                key=b"for",
                value=4,
                rest=Run(
                    prefix=b"sen",
                    min_size=6,
                    rest=Inline(
                        key=b"forsen", value=1, rest=_leaf(b"L", b"forsenL", 3)
                    ),
                ),
            ),
        )

        trie.insert(b"forsenE", 5)
        inner = trie.root.branches[ord("f")].rest.rest.rest
        assert inner == Inline(
            key=b"forsen",
            value=1,
            rest=Fanout(
                min_size=7,
                branches={
                    ord("L"): _leaf(b"", b"forsenL", 3),
                    ord("E"): _leaf(b"", b"forsenE", 5),
                },
            ),
        )

    def test_run_with_inline_sequence(self):
        trie = _trie((b"applejuice", 1), (b"applepie", 1))
        assert trie.root == Run(
            prefix=b"apple",
            min_size=8,
            rest=Fanout(
                min_size=8,
                branches={
                    ord("j"): _leaf(b"uice", b"applejuice", 1),
                    ord("p"): _leaf(b"ie", b"applepie", 1),
                },
            ),
        )

        trie.insert(b"banana", 1)
        assert trie.root.min_size == 6
        assert trie.root.branches[ord("a")].prefix == b"pple"
        assert trie.root.branches[ord("b")] == _leaf(b"anana", b"banana", 1)

        trie.insert(b"apple", 1)
        run = trie.root.branches[ord("a")]
        assert trie.root.min_size == 5
        assert run.min_size == 5
        assert isinstance(run.rest, Inline)
        assert run.rest.key == b"apple"
        assert run.rest.rest.min_size == 8

        trie.insert(b"a", 1)
        assert trie.root.min_size == 1
        branch = trie.root.branches[ord("a")]
        assert isinstance(branch, Inline)
        assert branch.key == b"a"
        assert branch.rest is run

    def test_leaf_with_empty_suffix_extended(self):
        trie = _trie((b"ab", 1), (b"ax", 2), (b"abc", 3))
        assert trie.root.prefix == b"a"
        assert trie.root.rest.branches[ord("b")] == Inline(
            key=b"ab", value=1, rest=_leaf(b"c", b"abc", 3)
        )

    def test_shorter_key_splits_leaf(self):
        trie = _trie((b"abcdef", 1), (b"abc", 2))
        assert trie.root == Run(
            prefix=b"abc",
            min_size=3,
            rest=Inline(key=b"abc", value=2, rest=_leaf(b"def", b"abcdef", 1)),
        )

    def test_longer_key_splits_leaf(self):
        trie = _trie((b"abc", 1), (b"abcdef", 2))
        assert trie.root == Run(
            prefix=b"abc",
            min_size=3,
            rest=Inline(key=b"abc", value=1, rest=_leaf(b"def", b"abcdef", 2)),
        )

    def test_single_byte_run_is_dropped_on_split(self):
        trie = _trie((b"ab1", 1), (b"ab2", 2), (b"b", 3))
        assert trie.root.branches[ord("a")] == Run(
            prefix=b"b",
            min_size=3,
            rest=Fanout(
                min_size=3,
                branches={
                    ord("1"): _leaf(b"", b"ab1", 1),
                    ord("2"): _leaf(b"", b"ab2", 2),
                },
            ),
        )

        trie = _trie((b"a1", 1), (b"a2", 2), (b"b", 3))
        assert isinstance(trie.root.branches[ord("a")], Fanout)

    def test_empty_key_wraps_node(self):
        trie = _trie((b"abc", 1), (b"", 2))
        assert trie.root == Inline(key=b"", value=2, rest=_leaf(b"abc", b"abc", 1))
        assert trie.min_size() == 0

    def test_overwrite_keeps_shape(self):
        trie = _trie((b"forsen", 1), (b"xqc", 2), (b"forsenL", 3), (b"for", 4))
        before = count_nodes(trie.root)
        for key in (b"forsen", b"xqc", b"forsenL", b"for"):
            trie.insert(key, 99)
        assert count_nodes(trie.root) == before
        assert dict(trie.items()) == {
            b"for": 99,
            b"forsen": 99,
            b"forsenL": 99,
            b"xqc": 99,
        }

    def test_str_keys_are_not_accepted(self):
        with pytest.raises(TypeError):
            KeyTrie().insert("text", 1)


class TestLookups:
    def test_scenario_a(self):
        trie = _trie((b"forsen", 1), (b"xqc", 2))
        assert trie.get(b"forsen") == 1
        assert trie.get(b"xqc") == 2
        assert trie.get(b"for") is None
        assert trie.min_size() == 3

    def test_scenario_b(self):
        trie = _trie((b"forsen", 1), (b"xqc", 2), (b"forsenL", 3))
        assert trie.get(b"forsen") == 1
        assert trie.get(b"forsenL") == 3
        assert trie.get(b"forsenLX") is None
        assert trie.min_size() == 3

    def test_scenario_c(self):
        trie = _trie((b"applejuice", 1), (b"applepie", 1), (b"apple", 1))
        assert trie.get(b"applejuice") == 1
        assert trie.get(b"applepie") == 1
        assert trie.get(b"apple") == 1
        assert trie.min_size() == 5

    def test_overwrite_leaves_other_keys(self):
        trie = _trie((b"forsen", 1), (b"xqc", 2), (b"forsen", 7))
        assert trie.get(b"forsen") == 7
        assert trie.get(b"xqc") == 2

    def test_idempotent_insert(self):
        once = _trie((b"apple", 1), (b"apricot", 2))
        twice = _trie((b"apple", 1), (b"apricot", 2), (b"apricot", 2))
        assert once.root == twice.root

    def test_rejects_prefixes_extensions_and_lookalikes(self):
        trie = KeyTrie((path.encode(), i) for i, path in enumerate(THEME_PATHS))
        for key in (b"", b"tabs", b"tabs.", b"window.textx", b"window.texu"):
            assert key not in trie

    def test_every_key_resolves(self):
        trie = KeyTrie((path.encode(), i) for i, path in enumerate(THEME_PATHS))
        for i, path in enumerate(THEME_PATHS):
            assert trie.get(path.encode()) == i
        assert len(trie) == len(THEME_PATHS)

    def test_items_are_sorted(self):
        trie = _trie((b"b", 1), (b"abc", 2), (b"a", 3))
        assert [key for key, _ in trie.items()] == [b"a", b"abc", b"b"]

    def test_default_is_returned_for_missing_key(self):
        assert KeyTrie().get(b"nope", -1) == -1


class TestMinSize:
    def test_tracks_shortest_key_while_inserting(self):
        trie = KeyTrie()
        expected = len(THEME_PATHS[0])
        for path in THEME_PATHS:
            trie.insert(path.encode(), 1)
            expected = min(expected, len(path))
            assert trie.min_size() == expected, path

    def test_shorter_key_lowers_bound(self):
        trie = _trie((b"abcdef", 1), (b"abcxyz", 2))
        assert trie.min_size() == 6
        trie.insert(b"ab", 3)
        assert trie.min_size() == 2

    def test_overwrite_does_not_change_bound(self):
        trie = _trie((b"abc", 1), (b"abcd", 2))
        trie.insert(b"abcd", 5)
        assert trie.min_size() == 3


class TestCountNodes:
    def test_empty(self):
        assert count_nodes(EmptyTrie()) == 0

    def test_nested(self):
        trie = _trie((b"forsen", 1), (b"xqc", 2), (b"forsenL", 3))
        # fanout, run, inline, two leaves
        assert count_nodes(trie.root) == 5
