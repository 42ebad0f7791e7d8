"""
Logging setup for ThesisQuill command line runs.

Library modules only create module-level loggers; handlers are installed
here, by the CLI, using rich for colored console output.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logging(level: str = "INFO", use_rich: bool = True,
                  console: Optional[Console] = None) -> logging.Logger:
    """
    Setup logging for the application.

    Args:
        level: Log level name
        use_rich: Whether to use the rich console handler
        console: Optional rich console (stderr by default)

    Returns:
        The package root logger
    """
    if level.upper() not in _LEVELS:
        raise ValueError(f"Invalid log level: {level}")

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
    root_logger.addHandler(handler)

    return logging.getLogger("thesisquill")
