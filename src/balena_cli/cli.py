"""The typer application for commands already migrated off the legacy parser."""

from __future__ import annotations

import sys
from typing import Optional

import typer

from balena_core.types import Argv

from .bootstrap import AppContext
from .commands.env import env_add_cmd, env_rm_cmd
from .commands.version import version_cmd
from .router import AppOptions

PROG_NAME = "balena"

app = typer.Typer(help="balena command line interface", add_completion=False)


@app.command("version")
def version(
    all_: bool = typer.Option(
        False, "--all", "-a", help="Include the Python version in the output"
    ),
    json_: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """
    Display version information for the balena CLI.
    """
    version_cmd(all_=all_, json_=json_)


# Topic commands are registered under colon-joined names; the router turns
# "env add" into "env:add" before dispatching here.


@app.command("env:add")
def env_add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Environment or config variable name"),
    value: Optional[str] = typer.Argument(
        None, help="Variable value; read from the local environment if omitted"
    ),
    application: Optional[int] = typer.Option(
        None, "--application", "-a", help="Application id"
    ),
    device: Optional[str] = typer.Option(None, "--device", "-d", help="Device uuid"),
):
    """
    Add an environment or config variable to an application or device.
    """
    env_add_cmd(ctx.obj, name, value, application=application, device=device)


@app.command("env:rm")
def env_rm(
    ctx: typer.Context,
    var_id: str = typer.Argument(..., metavar="ID", help="Variable id"),
    device: bool = typer.Option(
        False, "--device", "-d", help="The id refers to a device variable"
    ),
    config: bool = typer.Option(
        False, "--config", "-c", help="The id refers to a config variable"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """
    Remove an environment or config variable.
    """
    env_rm_cmd(ctx.obj, var_id, device=device, config=config, yes=yes)


def run(argv: Argv, options: AppOptions, *, context: AppContext) -> None:
    """
    Entry used by the router. `argv` is [program, script, *tokens].
    """
    try:
        app(args=list(argv[2:]), prog_name=PROG_NAME, obj=context)
    finally:
        if not options.no_flush:
            sys.stdout.flush()


__all__ = ["app", "run"]
