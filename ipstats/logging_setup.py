from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def level_for(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(verbosity: int = 0) -> None:
    """Route log records to stderr through rich; stdout stays reserved for results."""
    logging.basicConfig(
        level=level_for(verbosity),
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_path=verbosity >= 2,
                rich_tracebacks=True,
                log_time_format="%Y-%m-%d %H:%M:%S",
            )
        ],
        force=True,
    )
