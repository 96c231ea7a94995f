"""
Simian File Runner
==================
Execute .simian source files.

Usage:
    python -m simian examples/closures.simian
    python -m simian examples/closures.simian --ast
"""
import logging
import os
from typing import Callable

from termcolor import colored

from .config import SimianConfig
from .environment import Environment
from .interpreter import evaluate
from .objects import Error
from .parser import parse

logger = logging.getLogger(__name__)


def error_text(text: str, config: SimianConfig) -> str:
    """Paint an error line red unless colour is turned off."""
    if not config.color:
        return text
    return colored(text, "red", attrs=["bold"])


def report_parse_errors(errors: list[str], config: SimianConfig,
                        output_fn: Callable[[str], None]):
    output_fn(error_text(f"{len(errors)} parser error(s):", config))
    for message in errors:
        output_fn(error_text(f"\t{message}", config))


def run_file(filepath: str, config: SimianConfig | None = None,
             output_fn: Callable[[str], None] = print) -> int:
    """
    Execute a Simian source file.

    Args:
        filepath: Path to the source file
        config: Driver settings (colour, --ast)
        output_fn: Sink for every line of output

    Returns:
        0 on success, 1 on error
    """
    config = config or SimianConfig()
    if not os.path.exists(filepath):
        output_fn(error_text(f"Error: File not found: {filepath}", config))
        return 1

    with open(filepath, "r", encoding="utf-8") as f:
        source = f.read()

    logger.info("running %s", filepath)
    program, errors = parse(source)
    if errors:
        report_parse_errors(errors, config, output_fn)
        return 1

    if config.show_ast:
        output_fn(str(program))

    result = evaluate(program, Environment())

    if isinstance(result, Error):
        output_fn(error_text(result.inspect(), config))
        return 1
    if result is not None:
        output_fn(result.inspect())
    return 0
