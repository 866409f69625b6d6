from __future__ import annotations

import pytest

from balena_core.errors import InfraError, NotFound
from balena_core.ports import ClockPort, LoggerPort, PlatformPort
from balena_core.testkit import CapturingLogger, FakeClock, FakePlatform


def test_fakes_satisfy_ports():
    assert isinstance(FakeClock(), ClockPort)
    assert isinstance(CapturingLogger(), LoggerPort)
    assert isinstance(FakePlatform(), PlatformPort)


def test_fake_clock_advance():
    clock = FakeClock()
    t0 = clock.now()
    clock.advance(2.5)
    assert (clock.now() - t0).total_seconds() == 2.5


def test_capturing_logger_records_levels():
    logger = CapturingLogger()
    logger.debug("d", x=1)
    logger.info("i", k="v")
    logger.warning("w")
    logger.error("e", err="boom")

    assert [r["level"] for r in logger.records] == ["debug", "info", "warning", "error"]
    assert [r["msg"] for r in logger.records] == ["d", "i", "w", "e"]
    assert logger.records[-1]["err"] == "boom"


@pytest.mark.asyncio
async def test_fake_platform_records_calls_and_failures(fake_platform, application):
    assert await fake_platform.get_application(application.id) == application
    with pytest.raises(NotFound):
        await fake_platform.get_device("unknown")

    fake_platform.failures["whoami"] = InfraError(code="network_error", message="x")
    with pytest.raises(InfraError):
        await fake_platform.whoami()

    assert [name for name, _ in fake_platform.calls] == [
        "get_application",
        "get_device",
        "whoami",
    ]
