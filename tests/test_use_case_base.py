from __future__ import annotations

import asyncio

import pytest

from balena_core.errors import BalenaError, NotFound, ValidationError
from balena_core.result import Err, Ok, Result
from balena_core.use_case import AsyncUseCase


class LookupKey(AsyncUseCase[str, str]):
    def __init__(self) -> None:
        self.results: list = []

    async def avalidate(self, input: str) -> None:
        if not input:
            raise ValidationError("uuid required")

    async def aafter(self, result: Result[str, BalenaError]) -> None:
        self.results.append(result)

    async def aperform(self, input: str) -> str:
        await asyncio.sleep(0)
        if input == "missing":
            raise NotFound(f"Device {input} not found")
        return f"key-{input}"


@pytest.mark.asyncio
async def test_async_use_case_success():
    uc = LookupKey()
    res = await uc.execute("abc")
    assert isinstance(res, Ok)
    assert res.unwrap() == "key-abc"
    assert uc.results == [res]


@pytest.mark.asyncio
async def test_validation_error_to_err():
    uc = LookupKey()
    res = await uc.execute("")
    assert isinstance(res, Err)
    assert isinstance(res.err, ValidationError)
    assert uc.results == [res]


@pytest.mark.asyncio
async def test_balena_error_is_captured_unchanged():
    uc = LookupKey()
    res = await uc.execute("missing")
    assert isinstance(res.err, NotFound)
    assert res.err.message == "Device missing not found"


class Exploding(AsyncUseCase[int, int]):
    async def aperform(self, input: int) -> int:
        raise RuntimeError("boom")


@pytest.mark.asyncio
async def test_non_balena_error_propagates():
    with pytest.raises(RuntimeError):
        await Exploding().execute(0)
