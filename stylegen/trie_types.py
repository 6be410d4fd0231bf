"""Key trie — node types (pure data, no business logic).

A key trie is a compressed prefix tree over byte-string keys, shaped so that
it can be printed directly as a chain of length checks, literal comparisons
and byte switches.  Every node owns its children; no node is shared.

Example — after inserting ``apple``, ``applejuice`` and ``applepie``::

            Run       Inline   Fanout
             ▾          ▾        ▾
    >──────apple────────┬────────┬─j─uice   (Leaf)
                        ▧        ╰─p─ie     (Leaf)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class Run:
    """All keys below this node continue with the same ``prefix``.

    ``min_size`` is the length of the shortest complete key beneath the run.
    """

    prefix: bytes
    min_size: int
    rest: TrieNode


@dataclass
class Fanout:
    """All keys below this node differ in their next byte."""

    min_size: int
    branches: dict[int, TrieNode] = field(default_factory=dict)

    def sorted_branches(self) -> list[tuple[int, TrieNode]]:
        """Branches in ascending byte order (the order they are printed in)."""
        return sorted(self.branches.items(), key=lambda item: item[0])


@dataclass
class Inline:
    """A key ends here; longer keys continue in ``rest``."""

    key: bytes
    value: Any
    rest: TrieNode

    @property
    def min_size(self) -> int:
        return len(self.key)


@dataclass
class Leaf:
    """Exactly one key remains; ``suffix`` is the part not yet matched."""

    suffix: bytes
    key: bytes
    value: Any

    @property
    def min_size(self) -> int:
        return len(self.key)


@dataclass
class EmptyTrie:
    """No keys have been inserted yet."""

    @property
    def min_size(self) -> int:
        return 0


TrieNode = Union[Run, Fanout, Inline, Leaf, EmptyTrie]
