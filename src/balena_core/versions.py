from __future__ import annotations

import operator
import re
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Sequence, Tuple, TypeVar

from packaging.version import InvalidVersion, Version

from .errors import ValidationError

ActionT = TypeVar("ActionT")

_OPERATORS: Dict[str, Callable[[Version, Version], bool]] = {
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}
_REQUIREMENT = re.compile(r"^\s*(>=|<=|==|!=|>|<)\s*(\S+)\s*$")


@dataclass(frozen=True)
class VersionRule(Generic[ActionT]):
    """
    One row of an ordered rule table: when the OS version satisfies
    `requirement` (an operator and a version, such as ">=2.7.8"), `action`
    applies.

    Comparison uses plain version ordering, so pre-releases sort before
    their release (2.7.8-rc1 < 2.7.8) and revision labels after it
    (2.7.8+rev1 >= 2.7.8).
    """

    requirement: str
    action: ActionT

    def _parsed(self) -> Tuple[Callable[[Version, Version], bool], Version]:
        match = _REQUIREMENT.match(self.requirement)
        if match is None:
            raise ValidationError(
                f"Invalid version requirement: {self.requirement!r}"
            )
        return _OPERATORS[match.group(1)], parse_version(match.group(2))

    def matches(self, version: Version) -> bool:
        compare, threshold = self._parsed()
        return compare(version, threshold)


def parse_version(text: str | None) -> Version:
    """
    Parse an OS version such as "2.7.8", "v2.29.2+rev1" or "2.12.0-rc1".
    Raises ValidationError for missing or unparseable input.
    """
    if text is None or not str(text).strip():
        raise ValidationError("An OS version is required")
    raw = str(text).strip()
    if raw[:1] in ("v", "V"):
        raw = raw[1:]
    try:
        return Version(raw)
    except InvalidVersion as exc:
        raise ValidationError(
            f"Invalid OS version: {text!r}", {"version": text}
        ) from exc


def select(version: str | Version, rules: Sequence[VersionRule[ActionT]]) -> ActionT:
    """
    Evaluate `rules` top to bottom and return the first matching action.
    """
    parsed = version if isinstance(version, Version) else parse_version(version)
    for rule in rules:
        if rule.matches(parsed):
            return rule.action
    raise ValidationError(
        f"No rule applies to OS version {parsed}",
        {"rules": [r.requirement for r in rules]},
    )
