"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from cpops.cli.common.output import err_console


def configure_logging(verbose: bool = False) -> None:
    """Route `cpops` loggers through rich on stderr; DEBUG when verbose."""
    handler = RichHandler(
        console=err_console,
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger = logging.getLogger("cpops")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
