"""
Pytest fixtures for the balena CLI test kit.

Usage:
    # conftest.py
    from balena_core.testkit.fixtures import (  # noqa: F401
        fake_clock,
        capturing_logger,
        application,
        device,
        fake_platform,
    )

Fixtures:
- fake_clock: FakeClock pinned to 2024-01-01T00:00:00Z
- capturing_logger: CapturingLogger
- application: Application(id=123, name="MyFleet", device_type="raspberrypi4-64")
- device: Device belonging to `application`
- fake_platform: FakePlatform that knows `application` and `device`
"""

from __future__ import annotations

import pytest

from balena_core.models import Application, Device
from balena_core.testkit import CapturingLogger, FakeClock, FakePlatform


@pytest.fixture
def fake_clock() -> FakeClock:
    """Deterministic clock for tests (controls now())."""
    return FakeClock()


@pytest.fixture
def capturing_logger() -> CapturingLogger:
    """Logger that records log entries for assertions."""
    return CapturingLogger()


@pytest.fixture
def application() -> Application:
    return Application(id=123, name="MyFleet", device_type="raspberrypi4-64")


@pytest.fixture
def device(application: Application) -> Device:
    return Device(
        id=4567,
        uuid="f3887a7c1e5a4d2f9b0c7d6e5f4a3b2c",
        device_type="raspberrypi4-64",
        application_id=application.id,
    )


@pytest.fixture
def fake_platform(application: Application, device: Device) -> FakePlatform:
    """Platform fake seeded with one application and one device."""
    return FakePlatform(applications=[application], devices=[device])


__all__ = [
    "fake_clock",
    "capturing_logger",
    "application",
    "device",
    "fake_platform",
]
