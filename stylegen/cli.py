"""Command line entry point: ``stylegen code|theme|matcher``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .api import generate_code, generate_theme, lower_key_matcher
from .errors import StyleGenError, ThemeParseError, format_error_with_source
from .matchers import SUPPORTED_MATCHER_LANGUAGES
from .run_types import GeneratorConfig
from . import constants

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stylegen", description="Theme code generator"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable info logging and print generation statistics",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    code = sub.add_parser("code", help="Generate the C++ theme class")
    code.add_argument("default_style", help="Stylesheet with the default colors")
    code.add_argument(
        "--layout",
        "-l",
        default=constants.DEFAULT_LAYOUT_FILE,
        help=f"Layout file (default: {constants.DEFAULT_LAYOUT_FILE})",
    )
    _add_output_arguments(code)

    theme = sub.add_parser("theme", help="Convert a stylesheet to a .c2theme file")
    theme.add_argument("input", help="Stylesheet to convert")
    _add_output_arguments(theme)

    matcher = sub.add_parser("matcher", help="Print a lookup function for KEYs")
    matcher.add_argument(
        "keys", nargs="+", metavar="KEY", help="Keys, numbered from 0 in order"
    )
    matcher.add_argument(
        "--language",
        default=constants.DEFAULT_MATCHER,
        choices=SUPPORTED_MATCHER_LANGUAGES,
        help=f"Output dialect (default: {constants.DEFAULT_MATCHER})",
    )
    return parser


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output-dir",
        "-o",
        default=constants.DEFAULT_OUTPUT_DIR,
        help="Directory to write into (default: current directory)",
    )
    parser.add_argument(
        "--timestamp",
        "-t",
        action="store_true",
        help="Also touch a .timestamp file next to the output",
    )


def _report_theme_error(path: str, err: ThemeParseError) -> None:
    source = Path(path).read_text(encoding="utf-8")
    print(
        format_error_with_source(path, source, err.message, err.line, err.column),
        file=sys.stderr,
    )


def _run(args: argparse.Namespace) -> int:
    if args.command == "matcher":
        pairs = [(key, idx) for idx, key in enumerate(args.keys)]
        print(lower_key_matcher(pairs, args.language), end="")
        return 0

    config = GeneratorConfig(
        output_dir=Path(args.output_dir), timestamp=args.timestamp
    )
    if args.command == "code":
        stats = generate_code(args.layout, args.default_style, config)
    else:
        stats = generate_theme(args.input, config)
    if args.verbose:
        print(stats.report())
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    try:
        return _run(args)
    except ThemeParseError as err:
        stylesheet = args.default_style if args.command == "code" else args.input
        _report_theme_error(stylesheet, err)
        return 1
    except (StyleGenError, OSError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
