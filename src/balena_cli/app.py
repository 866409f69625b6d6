from __future__ import annotations

import sys
from functools import partial
from typing import Optional, Sequence

import typer

from balena_core.errors import BalenaError

from . import cli, legacy
from .bootstrap import AppContext, global_init
from .router import AppOptions, CommandRouter


def build_router(context: AppContext) -> CommandRouter:
    return CommandRouter(
        modern=partial(cli.run, context=context),
        legacy=partial(legacy.run, context=context),
        logger=context.logger,
    )


def run(
    cli_args: Optional[Sequence[str]] = None, options: Optional[AppOptions] = None
) -> None:
    """
    CLI entrypoint. `cli_args` is [program, script, *tokens]; defaults to
    the running interpreter followed by sys.argv.
    """
    argv = list(cli_args) if cli_args is not None else [sys.executable, *sys.argv]
    try:
        # before anything else: settings, logging and the platform factory
        context = global_init()
        build_router(context).route(argv, options or AppOptions())
    except typer.Exit as exc:
        sys.exit(exc.exit_code)
    except BalenaError as err:
        typer.secho(err.message, fg=typer.colors.RED, err=True)
        sys.exit(1)
