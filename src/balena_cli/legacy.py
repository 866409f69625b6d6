"""
The legacy argparse application. Receives the original argument vector,
untouched by the router, and does all of its own parsing.
"""

from __future__ import annotations

import argparse
from typing import List, NoReturn, Sequence, Tuple

import typer

from balena_core.types import Argv

from .bootstrap import AppContext
from .commands.config import add_generate_arguments, config_generate_cmd
from .utils.templating import render_text

PROG_NAME = "balena"

# (signature, description) for the help screen, both frameworks included
COMMANDS: Tuple[Tuple[str, str], ...] = (
    ("help [command...]", "show help"),
    ("version", "display version information for the balena CLI"),
    ("config generate", "generate a config.json file"),
    ("env add <name> [value]", "add an environment or config variable"),
    ("env rm <id>", "remove an environment or config variable"),
)


def matching_commands(topic: Sequence[str] = ()) -> List[Tuple[str, str]]:
    wanted = " ".join(topic)
    return [c for c in COMMANDS if c[0].startswith(wanted)]


def render_help(topic: Sequence[str] = ()) -> str:
    return render_text(
        "help.txt.j2",
        {
            "prog": PROG_NAME,
            "topic": " ".join(topic) or None,
            "commands": matching_commands(topic),
            "width": max(len(sig) for sig, _ in COMMANDS),
        },
    )


def _help_cmd(args: argparse.Namespace, context: AppContext) -> int:
    topic: List[str] = list(getattr(args, "topic", None) or [])
    if topic and not matching_commands(topic):
        typer.secho(
            f"Command not found: {' '.join(topic)}", fg=typer.colors.RED, err=True
        )
        return 1
    typer.echo(render_help(topic), nl=False)
    return 0


def _config_generate(args: argparse.Namespace, context: AppContext) -> int:
    return config_generate_cmd(args, context)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG_NAME, add_help=False)
    parser.add_argument("-h", "--help", action="store_true", dest="show_help")
    sub = parser.add_subparsers(dest="command")

    help_cmd = sub.add_parser("help", add_help=False)
    help_cmd.add_argument("topic", nargs="*")
    help_cmd.set_defaults(func=_help_cmd)

    config_cmd = sub.add_parser("config", help="device configuration")
    config_sub = config_cmd.add_subparsers(dest="config_command", required=True)
    generate_cmd = config_sub.add_parser(
        "generate", help="generate a config.json file"
    )
    add_generate_arguments(generate_cmd)
    generate_cmd.set_defaults(func=_config_generate)
    return parser


def main(argv: Argv, *, context: AppContext) -> int:
    """
    Parse and execute `argv` ([program, script, *tokens]); return exit code.
    """
    parser = build_parser()
    args = parser.parse_args(list(argv[2:]))
    func = getattr(args, "func", None)
    if args.show_help or func is None:
        return _help_cmd(args, context)
    if getattr(args, "application", None) is not None and (
        args.device_api_key or args.generate_device_api_key
    ):
        parser.error("device key options require --device")
    return func(args, context)


def run(argv: Argv, *, context: AppContext) -> NoReturn:
    raise SystemExit(main(argv, context=context))
