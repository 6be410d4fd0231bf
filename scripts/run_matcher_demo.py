#!/usr/bin/env python3
"""Demo: key trie construction and matcher lowering on a handful of theme paths.

Exercises the core pipeline:
  1. paths are inserted into a compressed key trie, one at a time
  2. the finished trie is lowered to a C++ ``getDataIndex`` function
  3. the same trie is lowered to Python and every path is looked up

Usage:
    python scripts/run_matcher_demo.py
    python scripts/run_matcher_demo.py --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure repo root is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from stylegen import constants
from stylegen.api import build_key_trie, lower_key_matcher
from stylegen.trie import count_nodes

SAMPLE_PATHS = [
    "messages.backgrounds.regular",
    "messages.backgrounds.alternate",
    "messages.disabled",
    "messages.textcolors.regular",
    "messages.textcolors.link",
    "tabs.border",
    "tabs.selected.text",
    "window.text",
    "window.background",
]


def _print_header(title: str) -> None:
    print(f"\n{'═' * 20} {title} {'═' * 20}")


def main():
    parser = argparse.ArgumentParser(description="Key matcher lowering demo")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    pairs = [(path, idx) for idx, path in enumerate(SAMPLE_PATHS)]

    _print_header("Keys")
    for path, idx in pairs:
        print(f"  {idx:3d} | {path}")

    trie = build_key_trie(pairs)
    _print_header("Trie")
    print(f"  Nodes        : {count_nodes(trie.root)}")
    print(f"  Shortest key : {trie.min_size()}")

    _print_header("C++")
    print(lower_key_matcher(pairs, constants.MATCHER_CPP, indent_unit="    "))

    _print_header("Python")
    source = lower_key_matcher(pairs, constants.MATCHER_PYTHON, indent_unit="    ")
    print(source)
    namespace: dict = {}
    exec(source, namespace)
    lookup = namespace[constants.PYTHON_MATCHER_FUNCTION]
    for path, idx in pairs:
        key = path.encode("utf-8")
        assert lookup(key, len(key)) == idx, path
    print(f"  all {len(pairs)} keys resolve")


if __name__ == "__main__":
    main()
