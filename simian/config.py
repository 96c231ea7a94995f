"""
Simian Configuration
====================
Settings shared by the REPL, the file runner and the command line.
"""
import logging
import os
from dataclasses import dataclass

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@dataclass
class SimianConfig:
    """Driver configuration.

    Values come from defaults, then the environment (``from_env``), then
    command-line flags.
    """

    prompt: str = ">> "           # REPL prompt
    color: bool = True            # Red error output via termcolor
    log_level: str = "WARNING"    # Root level for the stdlib logging setup
    show_ast: bool = False        # Print the parsed program before evaluating it

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "SimianConfig":
        """Build a config from SIMIAN_PROMPT, SIMIAN_LOG_LEVEL and NO_COLOR."""
        environ = os.environ if environ is None else environ
        config = cls()
        config.prompt = environ.get("SIMIAN_PROMPT", config.prompt)
        config.log_level = environ.get("SIMIAN_LOG_LEVEL", config.log_level).upper()
        if "NO_COLOR" in environ:
            config.color = False
        return config


def configure_logging(config: SimianConfig):
    """Install the root logging handler once, at the configured level."""
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.log_level}")
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
