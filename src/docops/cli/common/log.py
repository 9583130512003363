"""Logging setup for the CLI.

Core modules log through module-level loggers under the `docops` namespace;
the CLI routes them to stderr through Rich so log lines do not interleave
with tables printed on stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int | str = logging.WARNING) -> None:
    """
    Configure the `docops` logger.

    Args:
        level: Logging level or level name (e.g. "DEBUG").
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger = logging.getLogger("docops")
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False

    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
