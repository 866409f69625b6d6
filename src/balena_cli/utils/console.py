from __future__ import annotations

from typing import NoReturn

import typer

from balena_core.errors import BalenaError


def fail(message: str, code: int = 1) -> NoReturn:
    """
    Print a user-facing message to stderr and stop with `code`, no traceback.
    """
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code)


def report(err: BalenaError) -> int:
    typer.secho(f"{err.code}: {err.message}", fg=typer.colors.RED, err=True)
    return 1
