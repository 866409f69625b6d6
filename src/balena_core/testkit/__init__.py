from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..errors import BalenaError, NotFound
from ..models import Application, Device
from ..ports import ClockPort, LoggerPort, PlatformPort
from ..types import JSON


@dataclass
class FakeClock(ClockPort):
    """
    Deterministic clock for tests, starting at the provided 'now' (UTC).
    """

    now_dt: datetime = field(
        default_factory=lambda: datetime(2024, 1, 1, tzinfo=timezone.utc)
    )

    def now(self) -> datetime:
        return self.now_dt

    def advance(self, seconds: float) -> None:
        self.now_dt = self.now_dt + timedelta(seconds=seconds)


class CapturingLogger(LoggerPort):
    """
    Test logger that captures log records for assertions.
    """

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []

    def _push(self, level: str, msg: str, **fields: Any) -> None:
        rec = {"level": level, "msg": msg, **fields}
        self.records.append(rec)

    def debug(self, msg: str, **fields: Any) -> None:
        self._push("debug", msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._push("info", msg, **fields)

    def warning(self, msg: str, **fields: Any) -> None:
        self._push("warning", msg, **fields)

    def error(self, msg: str, **fields: Any) -> None:
        self._push("error", msg, **fields)


class FakePlatform(PlatformPort):
    """
    In-memory platform. Records every call as (method, args) in `calls`.
    Set `failures[method] = SomeBalenaError(...)` to make a call raise.
    """

    def __init__(
        self,
        *,
        applications: Optional[List[Application]] = None,
        devices: Optional[List[Device]] = None,
        template: Optional[JSON] = None,
        api_config: Optional[JSON] = None,
    ) -> None:
        self.applications = {a.id: a for a in applications or []}
        self.devices = {d.uuid: d for d in devices or []}
        self.template: JSON = template if template is not None else {}
        self.api_config: JSON = (
            api_config
            if api_config is not None
            else {
                "mixpanelToken": "mixpanel-token",
                "pubnub": {"subscribe_key": "sub", "publish_key": "pub"},
            }
        )
        self.settings = {
            "apiUrl": "https://api.balena-cloud.com",
            "vpnUrl": "vpn.balena-cloud.com",
            "registryUrl": "registry2.balena-cloud.com",
            "deltaUrl": "https://delta.balena-cloud.com",
        }
        self.user_id = 7
        self.username = "gh_tester"
        self.env_vars: Dict[int, JSON] = {}
        self.failures: Dict[str, BalenaError] = {}
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if method in self.failures:
            raise self.failures[method]

    def called(self, method: str) -> List[Tuple[Any, ...]]:
        return [args for name, args in self.calls if name == method]

    async def get_user_id(self) -> int:
        self._record("get_user_id")
        return self.user_id

    async def whoami(self) -> str:
        self._record("whoami")
        return self.username

    async def get_setting(self, name: str) -> str:
        self._record("get_setting", name)
        return self.settings[name]

    async def get_api_config(self) -> JSON:
        self._record("get_api_config")
        return dict(self.api_config)

    async def get_config_template(self, application_id: int, params: JSON) -> JSON:
        self._record("get_config_template", application_id, params)
        return self.template

    async def get_application(self, application_id: int) -> Application:
        self._record("get_application", application_id)
        try:
            return self.applications[application_id]
        except KeyError:
            raise NotFound(f"Application {application_id} not found") from None

    async def get_device(self, uuid: str) -> Device:
        self._record("get_device", uuid)
        try:
            return self.devices[uuid]
        except KeyError:
            raise NotFound(f"Device {uuid} not found") from None

    async def generate_application_key(self, application_id: int) -> str:
        self._record("generate_application_key", application_id)
        return f"app-key-{application_id}"

    async def generate_provisioning_key(self, application_id: int) -> str:
        self._record("generate_provisioning_key", application_id)
        return f"provisioning-key-{application_id}"

    async def generate_device_key(self, uuid: str) -> str:
        self._record("generate_device_key", uuid)
        return f"device-key-{uuid}"

    async def create_env_var(
        self,
        name: str,
        value: str,
        *,
        application_id: Optional[int] = None,
        device_uuid: Optional[str] = None,
        config: bool = False,
    ) -> None:
        self._record("create_env_var", name, value, application_id, device_uuid, config)
        var_id = len(self.env_vars) + 1
        self.env_vars[var_id] = {
            "name": name,
            "value": value,
            "application": application_id,
            "device": device_uuid,
            "config": config,
        }

    async def remove_env_var(
        self, var_id: int, *, device: bool = False, config: bool = False
    ) -> None:
        self._record("remove_env_var", var_id, device, config)
        if var_id not in self.env_vars:
            raise NotFound(f"Environment variable {var_id} not found")
        del self.env_vars[var_id]


__all__ = ["FakeClock", "CapturingLogger", "FakePlatform"]
