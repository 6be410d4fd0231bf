"""Composable API functions for the stylegen pipelines.

Each function corresponds to a CLI workflow (``code``, ``theme``,
``matcher``) but is callable programmatically without argparse.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, Union

from .generators import generate_c2theme, generate_header, generate_impl
from .layout import Layout
from .matchers import get_matcher
from .printer import Printer
from .run_types import GenerationStats, GeneratorConfig
from .theme_parser import parse_theme
from .theme_types import FlatTheme
from .trie import KeyTrie, count_nodes
from . import constants

logger = logging.getLogger(__name__)

Key = Union[bytes, str]


def _as_bytes(key: Key) -> bytes:
    return key.encode("utf-8") if isinstance(key, str) else bytes(key)


def build_key_trie(pairs: Iterable[tuple[Key, int]]) -> KeyTrie:
    """Insert every ``(key, value)`` pair, in order, into a new trie."""
    trie = KeyTrie()
    for key, value in pairs:
        trie.insert(_as_bytes(key), value)
    logger.info(
        "Built key trie: %d keys, %d nodes, shortest key %d",
        len(trie),
        count_nodes(trie.root),
        trie.min_size(),
    )
    return trie


def lower_key_matcher(
    pairs: Iterable[tuple[Key, int]],
    language: str = constants.DEFAULT_MATCHER,
    indent_unit: str = constants.INDENT_UNIT,
) -> str:
    """Build a trie from *pairs* and return the printed lookup function.

    Args:
        pairs: Ordered ``(key, id)`` pairs; later duplicates overwrite.
        language: Matcher dialect (``"cpp"`` or ``"python"``).
        indent_unit: String used for one level of indentation.

    Returns:
        The source of the lookup function.
    """
    matcher = get_matcher(language)
    trie = build_key_trie(pairs)
    printer = Printer(indent_unit=indent_unit)
    matcher.emit_function(printer, trie)
    return printer.getvalue()


def load_layout(path: Union[str, Path]) -> Layout:
    logger.info("Loading layout from %s", path)
    return Layout.parse(Path(path).read_text(encoding="utf-8"))


def load_theme(path: Union[str, Path]) -> FlatTheme:
    """Parse and flatten the stylesheet at *path*."""
    logger.info("Loading theme from %s", path)
    theme = parse_theme(Path(path).read_text(encoding="utf-8"))
    flat = theme.flatten()
    logger.info("Theme by %s defines %d colors", flat.meta.author, len(flat.rules))
    return flat


def _write_timestamp(path: Path, stats: GenerationStats) -> None:
    path.touch()
    stats.written.append(path)


def generate_code(
    layout_path: Union[str, Path],
    default_style_path: Union[str, Path],
    config: GeneratorConfig = GeneratorConfig(),
) -> GenerationStats:
    """Generate ``<basename>.cpp`` / ``<basename>.hpp`` into ``config.output_dir``.

    Args:
        layout_path: Path to the layout YAML file.
        default_style_path: Stylesheet that provides the default colors.
        config: Output options.

    Returns:
        Statistics, including every file that was written.
    """
    start = time.perf_counter()
    stats = GenerationStats()
    layout = load_layout(layout_path)
    theme = load_theme(default_style_path)

    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    base = output_dir / config.basename

    impl_path = base.with_suffix(constants.IMPL_SUFFIX)
    with impl_path.open("w", encoding="utf-8", newline="\n") as f:
        trie = generate_impl(Printer(f), layout, theme, config)
    stats.written.append(impl_path)

    header_path = base.with_suffix(constants.HEADER_SUFFIX)
    with header_path.open("w", encoding="utf-8", newline="\n") as f:
        generate_header(Printer(f), layout, config)
    stats.written.append(header_path)

    if config.timestamp:
        _write_timestamp(base.with_suffix(constants.TIMESTAMP_SUFFIX), stats)

    stats.color_count = layout.count_items()
    stats.key_count = len(trie)
    stats.trie_node_count = count_nodes(trie.root)
    stats.min_key_length = trie.min_size()
    stats.total_time = time.perf_counter() - start
    logger.info(
        "Generated %s with %d colors in %.1fms",
        config.basename,
        stats.color_count,
        stats.total_time * 1000,
    )
    return stats


def generate_theme(
    input_path: Union[str, Path],
    config: GeneratorConfig = GeneratorConfig(),
) -> GenerationStats:
    """Convert the stylesheet at *input_path* into a ``.c2theme`` file."""
    start = time.perf_counter()
    stats = GenerationStats()
    theme = load_theme(input_path)

    stem = Path(input_path).stem or constants.DEFAULT_THEME_BASENAME
    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    base = output_dir / stem

    theme_path = base.with_suffix(constants.C2THEME_SUFFIX)
    with theme_path.open("w", encoding="utf-8", newline="\n") as f:
        generate_c2theme(Printer(f), theme)
    stats.written.append(theme_path)

    if config.timestamp:
        _write_timestamp(base.with_suffix(constants.TIMESTAMP_SUFFIX), stats)

    stats.color_count = len(theme.rules)
    stats.total_time = time.perf_counter() - start
    logger.info("Wrote %s", theme_path)
    return stats
