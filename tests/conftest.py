from __future__ import annotations

from balena_core.testkit.fixtures import (  # noqa: F401
    application,
    capturing_logger,
    device,
    fake_clock,
    fake_platform,
)
