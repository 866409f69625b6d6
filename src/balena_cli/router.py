"""
Pre-parse the command line and hand it to one of the two CLI frameworks.

Commands migrated to the typer application are listed in MIGRATED_COMMANDS;
everything else still goes to the argparse-based legacy application, which
receives the argument vector untouched and does its own parsing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple, Union

from balena_core.ports import LoggerPort
from balena_core.types import Argv

from .utils.console import fail


@dataclass(frozen=True)
class AppOptions:
    # Skip the stdout flush that normally follows a command
    no_flush: bool = False


# Deleted commands -------------------------------------------------------------


@dataclass(frozen=True)
class Replaced:
    new_command: str
    version: str
    verb: str = "replaced"


@dataclass(frozen=True)
class Removed:
    version: str
    alternative: Optional[str] = None


Disposition = Union[Replaced, Removed]


@dataclass(frozen=True)
class DeletedCommand:
    match_tokens: Tuple[str, ...]
    disposition: Disposition

    @property
    def command(self) -> str:
        return " ".join(self.match_tokens)

    def message(self) -> str:
        d = self.disposition
        if isinstance(d, Replaced):
            return (
                f'Note: the command "balena {self.command}" was {d.verb} '
                f"in CLI version {d.version}.\n"
                f'Please use "balena {d.new_command}" instead.'
            )
        msg = (
            f'Note: the command "balena {self.command}" was removed '
            f"in CLI version {d.version}."
        )
        return f"{msg}\n{d.alternative}" if d.alternative else msg


STOP_ALTERNATIVE = (
    'Please use "balena ssh -s" to access the host OS, '
    "then use `balena-engine stop`."
)

DELETED_COMMANDS: Tuple[DeletedCommand, ...] = (
    DeletedCommand(("sync",), Replaced("push", "v11.0.0", verb="removed")),
    DeletedCommand(("local", "logs"), Replaced("logs", "v11.0.0")),
    DeletedCommand(("local", "push"), Replaced("push", "v11.0.0")),
    DeletedCommand(("local", "scan"), Replaced("scan", "v11.0.0")),
    DeletedCommand(("local", "ssh"), Replaced("ssh", "v11.0.0")),
    DeletedCommand(("local", "stop"), Removed("v11.0.0", STOP_ALTERNATIVE)),
)


def find_deleted_command(
    tokens: Sequence[str], table: Sequence[DeletedCommand] = DELETED_COMMANDS
) -> Optional[DeletedCommand]:
    """
    Longest-prefix match of `tokens` against `table`. A leading "help" is
    ignored, so "help local stop" finds "local stop".
    """
    if list(tokens[:1]) == ["help"]:
        tokens = tokens[1:]
    best: Optional[DeletedCommand] = None
    for entry in table:
        size = len(entry.match_tokens)
        if tuple(tokens[:size]) != entry.match_tokens:
            continue
        if best is None or size > len(best.match_tokens):
            best = entry
    return best


# Normalization and classification --------------------------------------------


def normalize(tokens: Sequence[str]) -> Argv:
    """
    Rewrite shorthand forms into what the typer application understands:
      --version / -v        -> version
      --help / -h           -> help
      help <cmd> [args...]  -> <cmd> [args...] --help
    """
    out = list(tokens)
    if not out:
        return out
    if out[0] in ("--version", "-v"):
        out[0] = "version"
    elif out[0] in ("--help", "-h"):
        out[0] = "help"
    if len(out) > 1 and out[0] == "help":
        out = [*out[1:], "--help"]
    return out


@dataclass(frozen=True)
class RouteDecision:
    migrated: bool
    topic: bool


# Single-token entries match token 0, two-token entries tokens 0 and 1.
MIGRATED_COMMANDS: Tuple[Tuple[str, ...], ...] = (
    ("version",),
    ("env", "add"),
    ("env", "rm"),
)


def classify(
    tokens: Sequence[str],
    migrated: Sequence[Tuple[str, ...]] = MIGRATED_COMMANDS,
) -> RouteDecision:
    for entry in migrated:
        if tuple(tokens[: len(entry)]) == entry:
            return RouteDecision(migrated=True, topic=len(entry) == 2)
    return RouteDecision(migrated=False, topic=False)


def topic_args(tokens: Sequence[str], decision: RouteDecision) -> Argv:
    """
    "env add FOO" -> "env:add FOO" for topic commands; others unchanged.
    """
    if not decision.topic:
        return list(tokens)
    return [f"{tokens[0]}:{tokens[1]}", *tokens[2:]]


# Router ----------------------------------------------------------------------

ModernRunner = Callable[[Argv, AppOptions], Any]
LegacyRunner = Callable[[Argv], Any]


class CommandRouter:
    """
    Decide which framework runs an invocation and call it exactly once.

    Frameworks are injected as callables receiving the full argument vector
    ([program, script, *tokens]); the modern one also gets AppOptions.
    """

    def __init__(
        self,
        *,
        modern: ModernRunner,
        legacy: LegacyRunner,
        logger: LoggerPort,
        deleted_commands: Sequence[DeletedCommand] = DELETED_COMMANDS,
        migrated_commands: Sequence[Tuple[str, ...]] = MIGRATED_COMMANDS,
    ) -> None:
        self.modern = modern
        self.legacy = legacy
        self.logger = logger
        self.deleted_commands = deleted_commands
        self.migrated_commands = migrated_commands

    def check_deleted_command(self, tokens: Sequence[str]) -> None:
        entry = find_deleted_command(tokens, self.deleted_commands)
        if entry is not None:
            fail(entry.message())

    def route(self, argv: Sequence[str], options: AppOptions) -> Any:
        self.logger.debug("original argv", argv=list(argv), length=len(argv))
        tokens = list(argv[2:])

        self.check_deleted_command(tokens)

        tokens = normalize(tokens)
        decision = classify(tokens, self.migrated_commands)
        if not decision.migrated:
            return self.legacy(list(argv))

        modern_argv = [*argv[:2], *topic_args(tokens, decision)]
        self.logger.debug("new argv", argv=modern_argv, length=len(modern_argv))
        return self.modern(modern_argv, options)
