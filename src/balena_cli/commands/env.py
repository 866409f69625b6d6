from __future__ import annotations

import asyncio
from typing import Optional

import typer

from balena_core.errors import BalenaError

from ..bootstrap import AppContext
from ..utils.console import fail, report

CONFIG_VAR_PREFIXES = ("BALENA_", "RESIN_")


def is_config_var(name: str) -> bool:
    """Variables with a reserved prefix configure the device supervisor."""
    return name.startswith(CONFIG_VAR_PREFIXES)


def env_add_cmd(
    context: AppContext,
    name: str,
    value: Optional[str] = None,
    application: Optional[int] = None,
    device: Optional[str] = None,
) -> None:
    """
    Add an environment or config variable to an application or device.
    A missing VALUE is read from the local environment variable of the same name.
    """
    if value is None:
        value = context.environ.get(name)
        if value is None:
            fail(f"Value not found for environment variable: {name}")
    if (application is None) == (device is None):
        fail("Either the --application or the --device option must be specified")

    async def _create() -> None:
        async with context.open_platform() as platform:
            await platform.create_env_var(
                name,
                value,
                application_id=application,
                device_uuid=device,
                config=is_config_var(name),
            )

    try:
        asyncio.run(_create())
    except BalenaError as err:
        raise typer.Exit(report(err)) from err


def env_rm_cmd(
    context: AppContext,
    var_id: str,
    device: bool = False,
    config: bool = False,
    yes: bool = False,
) -> None:
    """
    Remove an environment or config variable by its numeric id.
    """
    try:
        numeric_id = int(var_id)
    except ValueError:
        fail(f"The environment variable id must be an integer: {var_id}")

    if not yes:
        typer.confirm(
            "Are you sure you want to delete the environment variable?", abort=True
        )

    async def _remove() -> None:
        async with context.open_platform() as platform:
            await platform.remove_env_var(numeric_id, device=device, config=config)

    try:
        asyncio.run(_remove())
    except BalenaError as err:
        raise typer.Exit(report(err)) from err
