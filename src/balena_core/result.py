from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


class Result(Generic[T, E]):
    """
    Outcome of a use case: either Ok(value) or Err(error).

    Callers at the CLI edge usually fold it into an output/exit decision:

        res.fold(print_config, report_error)
    """

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    @property
    def ok(self) -> T | None:
        return self.value if isinstance(self, Ok) else None  # type: ignore[attr-defined]

    @property
    def err(self) -> E | None:
        return self.error if isinstance(self, Err) else None  # type: ignore[attr-defined]

    def map(self, fn: Callable[[T], U]) -> "Result[U, E]":
        if isinstance(self, Ok):
            return Ok(fn(self.value))
        return self  # type: ignore[return-value]

    def unwrap(self) -> T:
        if isinstance(self, Ok):
            return self.value
        raise RuntimeError(f"called unwrap() on Err: {self.error!r}")  # type: ignore[attr-defined]

    def unwrap_err(self) -> E:
        if isinstance(self, Err):
            return self.error
        raise RuntimeError(f"called unwrap_err() on Ok: {self.value!r}")  # type: ignore[attr-defined]

    def fold(self, on_ok: Callable[[T], U], on_err: Callable[[E], U]) -> U:
        if isinstance(self, Ok):
            return on_ok(self.value)
        return on_err(self.error)  # type: ignore[attr-defined]


@dataclass(slots=True)
class Ok(Result[T, E]):
    value: T


@dataclass(slots=True)
class Err(Result[T, E]):
    error: E
