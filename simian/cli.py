"""
Simian CLI
==========
Usage:
    simian                      # start the REPL
    simian program.simian       # run a file
    simian program.simian --ast --log-level DEBUG
"""
from __future__ import annotations

import argparse
import sys

from . import __version__
from .config import SimianConfig, configure_logging
from .repl import run_repl
from .run import run_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simian",
        description="Simian, a small interpreted language",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  simian\n"
            "  simian examples/fibonacci.simian\n"
            "  simian examples/fibonacci.simian --ast\n"
        ),
    )
    parser.add_argument("path", nargs="?", help="Source file to run (omit for the REPL)")
    parser.add_argument("--ast", action="store_true", help="Print the parsed program first")
    parser.add_argument("--log-level", default=None,
                        help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured errors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = SimianConfig.from_env()
    if args.ast:
        config.show_ast = True
    if args.log_level:
        config.log_level = args.log_level.upper()
    if args.no_color:
        config.color = False
    configure_logging(config)

    if args.path is None:
        run_repl(config)
        return 0
    return run_file(args.path, config)


if __name__ == "__main__":
    sys.exit(main())
