"""Key trie builder — incremental insertion into a compressed byte trie."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Iterator

from .trie_types import EmptyTrie, Fanout, Inline, Leaf, Run, TrieNode

logger = logging.getLogger(__name__)

_MISSING = object()


class Overlap(Enum):
    """How a key relates to the bytes stored at a node."""

    DIVERGE = "diverge"
    KEY_LONGER = "key_longer"
    KEY_SHORTER = "key_shorter"
    EQUAL = "equal"


@dataclass(frozen=True)
class PrefixMatch:
    """Result of comparing stored bytes with a key.

    ``at`` is the index of the first differing byte for ``DIVERGE`` and the
    length of the shorter operand otherwise.
    """

    overlap: Overlap
    at: int


def match_prefix(stored: bytes, key: bytes) -> PrefixMatch:
    """Compare *stored* with *key* up to the first differing byte."""
    shared = min(len(stored), len(key))
    for i in range(shared):
        if stored[i] != key[i]:
            return PrefixMatch(Overlap.DIVERGE, i)
    if len(stored) > len(key):
        return PrefixMatch(Overlap.KEY_SHORTER, shared)
    if len(stored) < len(key):
        return PrefixMatch(Overlap.KEY_LONGER, shared)
    return PrefixMatch(Overlap.EQUAL, shared)


def _run_tail(run: Run, start: int) -> TrieNode:
    """The part of *run* after ``prefix[:start]``, dropping an empty run."""
    if start >= len(run.prefix):
        return run.rest
    return Run(prefix=run.prefix[start:], min_size=run.min_size, rest=run.rest)


class KeyTrie:
    """Compressed trie mapping byte-string keys to values.

    Built by a sequence of :meth:`insert` calls and then handed, unchanged, to
    a matcher for printing.  Each insert replaces the affected subtree: the
    old node is taken apart and a new node is stored in its place.
    """

    def __init__(self, items: Iterable[tuple[bytes, Any]] = ()):
        self.root: TrieNode = EmptyTrie()
        self._INSERT_DISPATCH: dict[type, Callable] = {
            Run: self._insert_run,
            Fanout: self._insert_fanout,
            Inline: self._insert_inline,
            Leaf: self._insert_leaf,
            EmptyTrie: self._insert_empty,
        }
        for key, value in items:
            self.insert(key, value)

    # ── public API ───────────────────────────────────────────────

    def insert(self, key: bytes, value: Any) -> None:
        """Insert *key* with *value*, overwriting the value of an existing key."""
        key = bytes(key)
        self.root = self._insert(self.root, key, key, value)

    def min_size(self) -> int:
        """Length of the shortest inserted key (0 when empty)."""
        return self.root.min_size

    def get(self, key: bytes, default: Any = None) -> Any:
        """Walk the trie for *key*; return its value or *default*."""
        node = self.root
        rest = bytes(key)
        while True:
            if isinstance(node, Run):
                if not rest.startswith(node.prefix):
                    return default
                rest = rest[len(node.prefix) :]
                node = node.rest
            elif isinstance(node, Fanout):
                if not rest or rest[0] not in node.branches:
                    return default
                node = node.branches[rest[0]]
                rest = rest[1:]
            elif isinstance(node, Inline):
                if not rest:
                    return node.value
                node = node.rest
            elif isinstance(node, Leaf):
                return node.value if rest == node.suffix else default
            else:
                return default

    def items(self) -> Iterator[tuple[bytes, Any]]:
        """Yield ``(key, value)`` pairs in ascending byte order."""
        yield from _iter_items(self.root)

    def __contains__(self, key: bytes) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return sum(1 for _ in self.items())

    # ── insertion ────────────────────────────────────────────────

    def _insert(
        self, node: TrieNode, key: bytes, total_key: bytes, value: Any
    ) -> TrieNode:
        """Insert the remaining *key* below *node*; return the replacement node."""
        handler = self._INSERT_DISPATCH[type(node)]
        return handler(node, key, total_key, value)

    def _insert_run(
        self, node: Run, key: bytes, total_key: bytes, value: Any
    ) -> TrieNode:
        if not key:
            return Inline(key=total_key, value=value, rest=node)

        match = match_prefix(node.prefix, key)
        min_size = min(node.min_size, len(total_key))

        if match.overlap is Overlap.DIVERGE:
            n = match.at
            fanout = Fanout(
                min_size=min_size,
                branches={
                    node.prefix[n]: _run_tail(node, n + 1),
                    key[n]: Leaf(suffix=key[n + 1 :], key=total_key, value=value),
                },
            )
            if n == 0:
                return fanout
            return Run(prefix=node.prefix[:n], min_size=min_size, rest=fanout)

        if match.overlap is Overlap.KEY_LONGER:
            node.min_size = min_size
            node.rest = self._insert(
                node.rest, key[len(node.prefix) :], total_key, value
            )
            return node

        if match.overlap is Overlap.KEY_SHORTER:
            return Run(
                prefix=key,
                min_size=min_size,
                rest=Inline(
                    key=total_key, value=value, rest=_run_tail(node, len(key))
                ),
            )

        # EQUAL: the key ends right after this run
        if isinstance(node.rest, Inline):
            node.rest.value = value
            return node
        node.min_size = min_size
        node.rest = Inline(key=total_key, value=value, rest=node.rest)
        return node

    def _insert_fanout(
        self, node: Fanout, key: bytes, total_key: bytes, value: Any
    ) -> TrieNode:
        if not key:
            return Inline(key=total_key, value=value, rest=node)

        node.min_size = min(node.min_size, len(total_key))
        child = node.branches.get(key[0])
        if child is None:
            node.branches[key[0]] = Leaf(suffix=key[1:], key=total_key, value=value)
        else:
            node.branches[key[0]] = self._insert(child, key[1:], total_key, value)
        return node

    def _insert_inline(
        self, node: Inline, key: bytes, total_key: bytes, value: Any
    ) -> TrieNode:
        if not key:
            node.value = value
            return node
        # the inline node consumed no bytes, so the key is passed on whole
        node.rest = self._insert(node.rest, key, total_key, value)
        return node

    def _insert_leaf(
        self, node: Leaf, key: bytes, total_key: bytes, value: Any
    ) -> TrieNode:
        match = match_prefix(node.suffix, key)
        min_size = min(len(node.key), len(total_key))

        if match.overlap is Overlap.DIVERGE:
            n = match.at
            fanout = Fanout(
                min_size=min_size,
                branches={
                    node.suffix[n]: Leaf(
                        suffix=node.suffix[n + 1 :], key=node.key, value=node.value
                    ),
                    key[n]: Leaf(suffix=key[n + 1 :], key=total_key, value=value),
                },
            )
            if n == 0:
                return fanout
            return Run(prefix=key[:n], min_size=min_size, rest=fanout)

        if match.overlap is Overlap.KEY_LONGER:
            if not node.suffix:
                return Inline(
                    key=node.key,
                    value=node.value,
                    rest=Leaf(suffix=key, key=total_key, value=value),
                )
            return Run(
                prefix=node.suffix,
                min_size=min_size,
                rest=Inline(
                    key=node.key,
                    value=node.value,
                    rest=Leaf(
                        suffix=key[len(node.suffix) :], key=total_key, value=value
                    ),
                ),
            )

        if match.overlap is Overlap.KEY_SHORTER:
            if not key:
                return Inline(key=total_key, value=value, rest=node)
            return Run(
                prefix=key,
                min_size=min_size,
                rest=Inline(
                    key=total_key,
                    value=value,
                    rest=Leaf(
                        suffix=node.suffix[len(key) :], key=node.key, value=node.value
                    ),
                ),
            )

        node.value = value
        return node

    def _insert_empty(
        self, node: EmptyTrie, key: bytes, total_key: bytes, value: Any
    ) -> TrieNode:
        logger.debug("First key inserted: %r", total_key)
        return Leaf(suffix=key, key=total_key, value=value)


def _iter_items(node: TrieNode) -> Iterator[tuple[bytes, Any]]:
    if isinstance(node, Run):
        yield from _iter_items(node.rest)
    elif isinstance(node, Fanout):
        for _byte, child in node.sorted_branches():
            yield from _iter_items(child)
    elif isinstance(node, Inline):
        yield node.key, node.value
        yield from _iter_items(node.rest)
    elif isinstance(node, Leaf):
        yield node.key, node.value


def count_nodes(node: TrieNode) -> int:
    """Number of nodes in the subtree rooted at *node*."""
    if isinstance(node, (Run, Inline)):
        return 1 + count_nodes(node.rest)
    if isinstance(node, Fanout):
        return 1 + sum(count_nodes(child) for child in node.branches.values())
    if isinstance(node, Leaf):
        return 1
    return 0
