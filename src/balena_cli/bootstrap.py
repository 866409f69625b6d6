"""Process-wide initialization, run once before any command is routed."""

from __future__ import annotations

import os
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import AsyncIterator, Callable, Mapping, Optional

from balena_core.clock import SystemClock
from balena_core.errors import ExpectedError
from balena_core.log import StdLogger, configure_logging
from balena_core.platform import HttpPlatform
from balena_core.ports import ClockPort, LoggerPort, PlatformPort
from balena_core.settings import Settings, load_settings

MIN_PYTHON = (3, 10)


@dataclass
class AppContext:
    """
    Everything commands need from the outside world, built by global_init()
    and passed down explicitly (as typer's `obj` and as legacy handler args).
    """

    settings: Settings
    logger: LoggerPort
    clock: ClockPort
    platform_factory: Callable[[], PlatformPort]
    environ: Mapping[str, str] = field(default_factory=dict)

    @asynccontextmanager
    async def open_platform(self) -> AsyncIterator[PlatformPort]:
        platform = self.platform_factory()
        try:
            yield platform
        finally:
            aclose = getattr(platform, "aclose", None)
            if aclose is not None:
                await aclose()


def check_python_version(version_info=sys.version_info) -> None:
    if tuple(version_info[:2]) < MIN_PYTHON:
        required = ".".join(str(p) for p in MIN_PYTHON)
        found = ".".join(str(p) for p in version_info[:3])
        raise ExpectedError(
            f"This version of the balena CLI requires Python {required} or later "
            f"(found {found})."
        )


def global_init(
    environ: Optional[Mapping[str, str]] = None, rc_path: Optional[Path] = None
) -> AppContext:
    check_python_version()
    env = dict(os.environ) if environ is None else environ
    settings = load_settings(env, rc_path)
    configure_logging(settings.debug)
    return AppContext(
        settings=settings,
        logger=StdLogger(),
        clock=SystemClock(),
        platform_factory=lambda: HttpPlatform(settings),
        environ=env,
    )
