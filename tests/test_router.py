from __future__ import annotations

from typing import Any, List, Tuple

import pytest
import typer

from balena_cli.router import (
    DELETED_COMMANDS,
    AppOptions,
    CommandRouter,
    DeletedCommand,
    Removed,
    Replaced,
    RouteDecision,
    classify,
    find_deleted_command,
    normalize,
    topic_args,
)
from balena_core.testkit import CapturingLogger

ARGV0 = ["/usr/bin/python3", "/usr/local/bin/balena"]


class Recorder:
    """Stands in for both frameworks and remembers what each received."""

    def __init__(self) -> None:
        self.modern: List[Tuple[List[str], AppOptions]] = []
        self.legacy: List[List[str]] = []

    def run_modern(self, argv: List[str], options: AppOptions) -> Any:
        self.modern.append((argv, options))

    def run_legacy(self, argv: List[str]) -> Any:
        self.legacy.append(argv)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def router(recorder: Recorder, capturing_logger: CapturingLogger) -> CommandRouter:
    return CommandRouter(
        modern=recorder.run_modern,
        legacy=recorder.run_legacy,
        logger=capturing_logger,
    )


# ----------------------------
# Deleted commands
# ----------------------------


@pytest.mark.parametrize(
    "tokens",
    [
        ["local", "stop"],
        ["help", "local", "stop"],
        ["local", "push", "--force"],
        ["sync"],
        ["sync", "--source", "."],
        ["local", "ssh", "abc123"],
    ],
)
def test_deleted_command_exits_without_dispatch(router, recorder, tokens, capsys):
    with pytest.raises(typer.Exit) as exc_info:
        router.route([*ARGV0, *tokens], AppOptions())

    assert exc_info.value.exit_code == 1
    assert recorder.modern == []
    assert recorder.legacy == []
    assert "Note: the command" in capsys.readouterr().err


def test_replaced_message_names_new_command_and_version(capsys, router):
    with pytest.raises(typer.Exit):
        router.route([*ARGV0, "local", "logs"], AppOptions())
    err = capsys.readouterr().err
    assert 'Note: the command "balena local logs" was replaced in CLI version v11.0.0.' in err
    assert 'Please use "balena logs" instead.' in err


def test_sync_uses_removed_verb():
    entry = find_deleted_command(["sync"])
    assert entry is not None
    assert entry.message().startswith(
        'Note: the command "balena sync" was removed in CLI version v11.0.0.'
    )
    assert 'Please use "balena push" instead.' in entry.message()


def test_removed_message_includes_alternative():
    entry = find_deleted_command(["local", "stop"])
    assert entry is not None
    assert isinstance(entry.disposition, Removed)
    lines = entry.message().splitlines()
    assert lines[0] == (
        'Note: the command "balena local stop" was removed in CLI version v11.0.0.'
    )
    assert "balena-engine stop" in lines[1]


def test_removed_without_alternative_is_single_line():
    entry = DeletedCommand(("old",), Removed("v12.0.0"))
    assert entry.message() == (
        'Note: the command "balena old" was removed in CLI version v12.0.0.'
    )


def test_longest_prefix_wins():
    table = (
        DeletedCommand(("local",), Replaced("devices", "v1.0.0")),
        DeletedCommand(("local", "stop"), Removed("v2.0.0")),
    )
    assert find_deleted_command(["local", "stop", "x"], table).command == "local stop"
    assert find_deleted_command(["local", "scan"], table).command == "local"


def test_non_deleted_commands_are_not_matched():
    assert find_deleted_command([]) is None
    assert find_deleted_command(["help"]) is None
    assert find_deleted_command(["local"]) is None
    assert find_deleted_command(["push", "myfleet"]) is None
    assert len(DELETED_COMMANDS) == 6


# ----------------------------
# Normalization
# ----------------------------


@pytest.mark.parametrize("flag", ["--version", "-v"])
def test_version_flags_normalize_to_version(flag):
    assert normalize([flag]) == normalize(["version"]) == ["version"]


@pytest.mark.parametrize("flag", ["--help", "-h"])
def test_help_flags_normalize_to_help(flag):
    assert normalize([flag]) == normalize(["help"]) == ["help"]


def test_help_prefix_moves_to_trailing_flag():
    assert normalize(["help", "env", "add"]) == ["env", "add", "--help"]
    assert normalize(["-h", "env", "rm", "12"]) == ["env", "rm", "12", "--help"]


def test_normalize_leaves_other_tokens_alone():
    original = ["env", "add", "-v"]
    assert normalize(original) == ["env", "add", "-v"]
    assert normalize([]) == []


def test_normalize_does_not_mutate_input():
    tokens = ["--help", "env", "add"]
    normalize(tokens)
    assert tokens == ["--help", "env", "add"]


# ----------------------------
# Classification
# ----------------------------


def test_classify_single_and_topic_commands():
    assert classify(["version"]) == RouteDecision(migrated=True, topic=False)
    assert classify(["version", "--json"]) == RouteDecision(True, False)
    assert classify(["env", "add", "FOO", "bar"]) == RouteDecision(True, True)
    assert classify(["env", "rm", "12"]) == RouteDecision(True, True)


def test_classify_defaults_to_legacy():
    assert classify(["foo", "bar"]) == RouteDecision(False, False)
    assert classify(["env"]) == RouteDecision(False, False)
    assert classify(["envs"]) == RouteDecision(False, False)
    assert classify(["env", "list"]) == RouteDecision(False, False)
    assert classify(["help"]) == RouteDecision(False, False)
    assert classify([]) == RouteDecision(False, False)


def test_topic_args_join_first_two_tokens():
    decision = RouteDecision(True, True)
    assert topic_args(["env", "add", "FOO", "bar"], decision) == ["env:add", "FOO", "bar"]
    assert topic_args(["version"], RouteDecision(True, False)) == ["version"]


# ----------------------------
# Dispatch
# ----------------------------


def test_topic_command_dispatches_to_modern_with_colon_syntax(router, recorder):
    options = AppOptions(no_flush=True)
    router.route([*ARGV0, "env", "add", "FOO", "bar", "-a", "123"], options)

    assert recorder.legacy == []
    assert recorder.modern == [
        ([*ARGV0, "env:add", "FOO", "bar", "-a", "123"], options)
    ]


def test_version_flag_dispatches_to_modern(router, recorder):
    router.route([*ARGV0, "-v"], AppOptions())
    assert recorder.modern[0][0] == [*ARGV0, "version"]


def test_help_prefixed_topic_becomes_trailing_help(router, recorder):
    router.route([*ARGV0, "help", "env", "add"], AppOptions())
    assert recorder.modern[0][0] == [*ARGV0, "env:add", "--help"]


def test_unknown_command_forwards_original_argv_to_legacy(router, recorder):
    argv = [*ARGV0, "foo", "bar"]
    router.route(argv, AppOptions())
    assert recorder.modern == []
    assert recorder.legacy == [argv]


def test_legacy_receives_unnormalized_argv(router, recorder):
    argv = [*ARGV0, "--help"]
    router.route(argv, AppOptions())
    assert recorder.legacy == [[*ARGV0, "--help"]]


def test_route_traces_argv_rewriting(router, capturing_logger):
    router.route([*ARGV0, "env", "rm", "7"], AppOptions())
    msgs = [r["msg"] for r in capturing_logger.records]
    assert msgs == ["original argv", "new argv"]
    assert capturing_logger.records[-1]["argv"] == [*ARGV0, "env:rm", "7"]
    assert all(r["level"] == "debug" for r in capturing_logger.records)
