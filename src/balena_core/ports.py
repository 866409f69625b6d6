from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, runtime_checkable

from .models import Application, Device
from .types import JSON


@runtime_checkable
class Port(Protocol):
    """
    Marker protocol for ports (dependencies).
    Ports define behavior (contracts) that routing and use cases depend on.
    """


@runtime_checkable
class LoggerPort(Port, Protocol):
    """
    Minimal structured logger port. Accepts a message and optional contextual fields.
    """

    def debug(self, msg: str, **fields: Any) -> None: ...
    def info(self, msg: str, **fields: Any) -> None: ...
    def warning(self, msg: str, **fields: Any) -> None: ...
    def error(self, msg: str, **fields: Any) -> None: ...


@runtime_checkable
class ClockPort(Port, Protocol):
    """
    Clock abstraction to enable deterministic tests.
    """

    def now(self) -> datetime: ...


@runtime_checkable
class PlatformPort(Port, Protocol):
    """
    The remote platform as seen by the CLI. Every call may raise a
    BalenaError subclass (NotFound, PermissionDenied, InfraError); callers
    let those propagate.
    """

    # auth
    async def get_user_id(self) -> int: ...
    async def whoami(self) -> str: ...

    # settings / config
    async def get_setting(self, name: str) -> str: ...
    async def get_api_config(self) -> JSON: ...
    async def get_config_template(self, application_id: int, params: JSON) -> JSON: ...

    # models
    async def get_application(self, application_id: int) -> Application: ...
    async def get_device(self, uuid: str) -> Device: ...
    async def generate_application_key(self, application_id: int) -> str: ...
    async def generate_provisioning_key(self, application_id: int) -> str: ...
    async def generate_device_key(self, uuid: str) -> str: ...

    # environment variables
    async def create_env_var(
        self,
        name: str,
        value: str,
        *,
        application_id: Optional[int] = None,
        device_uuid: Optional[str] = None,
        config: bool = False,
    ) -> None: ...

    async def remove_env_var(
        self, var_id: int, *, device: bool = False, config: bool = False
    ) -> None: ...
