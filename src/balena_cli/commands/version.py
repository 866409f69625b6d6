from __future__ import annotations

import json
import platform
from importlib import metadata

import typer

DISTRIBUTION = "balena-cli"


def cli_version() -> str:
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        # running from a source checkout
        return "0.0.0"


def version_cmd(all_: bool = False, json_: bool = False) -> None:
    """
    Print the CLI version, optionally with the Python runtime version.
    """
    info = {"balena-cli": cli_version()}
    if all_ or json_:
        info["python"] = platform.python_version()

    if json_:
        typer.echo(json.dumps(info, indent=4))
    elif all_:
        typer.echo(f"balena-cli version \"{info['balena-cli']}\"")
        typer.echo(f"Python version \"{info['python']}\"")
    else:
        typer.echo(info["balena-cli"])
