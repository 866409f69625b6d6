from __future__ import annotations

import pytest

from balena_core.errors import ValidationError
from balena_core.versions import VersionRule, parse_version, select

RULES = (
    VersionRule(">=2.7.8", "provisioning"),
    VersionRule("<2.7.8", "application"),
)


@pytest.mark.parametrize(
    "version, expected",
    [
        ("2.7.7", "application"),
        ("2.7.8", "provisioning"),
        ("2.0.0", "application"),
        ("2.29.2+rev1", "provisioning"),
        ("v2.29.2+rev1.prod", "provisioning"),
        ("2.7.8+rev1", "provisioning"),
        (" 2.7.7 ", "application"),
    ],
)
def test_select_first_matching_rule(version, expected):
    assert select(version, RULES) == expected


def test_prerelease_versions_are_compared():
    assert select("2.12.0-rc1", RULES) == "provisioning"
    assert select("2.7.8-beta.1", RULES) == "application"


def test_rules_evaluated_in_order():
    rules = (VersionRule(">=1.0.0", "first"), VersionRule(">=2.0.0", "second"))
    assert select("3.0.0", rules) == "first"


@pytest.mark.parametrize("bad", ["", "   ", None, "latest", "not.a.version", "2.x"])
def test_unparseable_version_raises(bad):
    with pytest.raises(ValidationError):
        parse_version(bad)
    with pytest.raises(ValidationError):
        select(bad, RULES)


def test_no_matching_rule_raises():
    with pytest.raises(ValidationError) as exc_info:
        select("1.0.0", (VersionRule(">=2.0.0", "x"),))
    assert exc_info.value.details == {"rules": [">=2.0.0"]}


def test_invalid_requirement_raises_validation_error():
    with pytest.raises(ValidationError):
        select("2.0.0", (VersionRule("about 2", "x"),))
