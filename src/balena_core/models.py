from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .types import JSON

# Literal a caller passes as the device key to request a fresh one.
GENERATE_DEVICE_KEY = "generate a new one"


@dataclass(frozen=True)
class Application:
    id: int
    name: str
    device_type: str

    @classmethod
    def from_resource(cls, data: JSON) -> "Application":
        return cls(
            id=int(data["id"]),
            name=str(data["app_name"]),
            device_type=str(data["device_type"]),
        )


@dataclass(frozen=True)
class Device:
    id: int
    uuid: str
    device_type: str
    application_id: int

    @classmethod
    def from_resource(cls, data: JSON) -> "Device":
        app = data["belongs_to__application"]
        # pine returns either a deferred {"__id": n} or the expanded record
        app_id = app["__id"] if "__id" in app else app["id"]
        return cls(
            id=int(data["id"]),
            uuid=str(data["uuid"]),
            device_type=str(data["device_type"]),
            application_id=int(app_id),
        )


@dataclass
class ConfigOptions:
    """
    Caller-supplied knobs for config generation.

    `app_update_poll_interval` is in minutes; the generated config stores
    milliseconds.
    """

    version: str
    app_update_poll_interval: Optional[int] = None
    device_type: Optional[str] = None
    ssh_keys: Sequence[str] = field(default_factory=tuple)
    network: str = "ethernet"  # ethernet | wifi
    wifi_ssid: Optional[str] = None
    wifi_key: Optional[str] = None

    @property
    def poll_interval_ms(self) -> Optional[int]:
        if not self.app_update_poll_interval:
            return None
        return self.app_update_poll_interval * 60 * 1000

    def template_params(self) -> JSON:
        params: JSON = {"version": self.version, "network": self.network}
        if self.poll_interval_ms:
            params["appUpdatePollInterval"] = self.poll_interval_ms
        if self.device_type:
            params["deviceType"] = self.device_type
        return params
