"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from docops.cli.common.output import out
from docops.core.errors import DocOpsError, TransportError


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """Print an error message and exit, chaining the original exception."""
    out.error(message)
    raise typer.Exit(code) from exc


def exit_from_api_error(exc: DocOpsError, *, action: str) -> NoReturn:
    """
    Standard exit for a failed remote call.

    Transport failures name the HTTP status when there is one; operation
    failures carry the API's own message.
    """
    if isinstance(exc, TransportError) and exc.status_code is not None:
        message = f"{action} failed (HTTP {exc.status_code})."
    else:
        message = f"{action} failed: {exc}"
    exit_from_exc(exc, message=message, code=1)
