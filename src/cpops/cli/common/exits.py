"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from cpops.cli.common.output import out
from cpops.core.errors import (
    AmbiguousSelectionError,
    CatalogListError,
    ProtocolViolationError,
)

EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_PROTOCOL = 3


def die(msg: str, code: int = EXIT_ERROR) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = EXIT_ERROR) -> NoReturn:
    """Print an error message and exit, chaining the original exception."""
    out.error(message)
    raise typer.Exit(code) from exc


def exit_from_listing_error(exc: CatalogListError) -> NoReturn:
    """Map a catalog listing failure to its message and exit code."""
    if isinstance(exc, AmbiguousSelectionError):
        exit_from_exc(
            exc,
            message=(
                f"{exc}.\nRun `cpops catalog list --pick` to choose interactively, "
                "or pass --prefix / --name."
            ),
            code=EXIT_USAGE,
        )
    if isinstance(exc, ProtocolViolationError):
        exit_from_exc(
            exc,
            message=f"The control-plane API broke its pagination contract: {exc}",
            code=EXIT_PROTOCOL,
        )
    exit_from_exc(exc, message=str(exc), code=EXIT_ERROR)
