"""
Simian REPL
===========
Interactive Read-Eval-Print Loop. Bindings persist for the whole session.
"""
from typing import Callable

from . import __version__
from .builtins import describe_all
from .config import SimianConfig
from .environment import Environment
from .interpreter import evaluate
from .objects import Error
from .parser import parse
from .run import error_text, report_parse_errors

BANNER = f"""Simian {__version__}
Type 'help' for the builtin list, 'env' for bindings, 'exit' to quit."""

HELP_TEXT = """Statements:  let x = 1;  return x;  for (let i = 0; i < 3; i = i + 1) { ... }
Expressions: fn(a, ...rest) { ... }  if (c) { ... } else { ... }  [1, 2]  {"k": 1}
Builtins:    {builtins}"""


def run_repl(config: SimianConfig | None = None,
             input_fn: Callable[[str], str] = input,
             output_fn: Callable[[str], None] = print):
    """Run the interactive Simian REPL until exit, quit or end of input."""
    config = config or SimianConfig()
    output_fn(BANNER)

    env = Environment()

    while True:
        try:
            line = input_fn(config.prompt)
        except (EOFError, KeyboardInterrupt):
            output_fn("")
            break

        line = line.strip()
        if not line:
            continue

        # Special commands
        command = line.lower()
        if command in ("exit", "quit"):
            break

        if command == "help":
            output_fn(HELP_TEXT.replace("{builtins}", describe_all()))
            continue

        if command == "env":
            if env.store:
                for name, value in env.store.items():
                    output_fn(f"{name} = {value.inspect()}")
            else:
                output_fn("(no bindings)")
            continue

        program, errors = parse(line)
        if errors:
            report_parse_errors(errors, config, output_fn)
            continue

        if config.show_ast:
            output_fn(str(program))

        result = evaluate(program, env)

        if isinstance(result, Error):
            output_fn(error_text(result.inspect(), config))
        elif result is not None:
            output_fn(result.inspect())
