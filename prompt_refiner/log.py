"""Logging setup for the CLI and the daemon."""

import logging
import os
from typing import Mapping, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = 'REFINER_LOG_LEVEL'


def setup_logging(
    level: Optional[Union[int, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    console: Optional[Console] = None
) -> None:
    """Install a Rich handler on the root logger.

    ``level`` wins over REFINER_LOG_LEVEL, which wins over WARNING.
    """
    env = os.environ if environ is None else environ
    if level is None:
        level = env.get(LOG_LEVEL_ENV, 'WARNING').upper()
    if isinstance(level, str) and not isinstance(logging.getLevelName(level), int):
        level = 'WARNING'

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        show_time=True,
        show_level=True,
    )
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
