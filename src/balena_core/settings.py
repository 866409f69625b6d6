"""Runtime settings for the balena CLI.

Values come from built-in defaults, then ``~/.balenarc.yml``, then the
process environment (highest precedence).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .errors import NotFound, ValidationError

DEFAULT_BALENA_URL = "balena-cloud.com"
DEFAULT_TIMEOUT = 30.0

ENV_DEBUG = "DEBUG"
ENV_ROOT_CA = "BALENA_EXTRA_CA_CERTS"
ENV_API_KEY = "BALENA_API_KEY"
ENV_PREFIX = "BALENARC_"


@dataclass(frozen=True)
class Settings:
    balena_url: str = DEFAULT_BALENA_URL
    data_directory: Path = Path.home() / ".balena"
    token: Optional[str] = None
    root_ca_path: Optional[Path] = None
    proxy: Optional[str] = None
    request_timeout: float = DEFAULT_TIMEOUT
    debug: bool = False

    @property
    def api_url(self) -> str:
        return f"https://api.{self.balena_url}"

    @property
    def vpn_url(self) -> str:
        return f"vpn.{self.balena_url}"

    @property
    def registry_url(self) -> str:
        return f"registry2.{self.balena_url}"

    @property
    def delta_url(self) -> str:
        return f"https://delta.{self.balena_url}"

    @property
    def dashboard_url(self) -> str:
        return f"https://dashboard.{self.balena_url}"

    @property
    def token_file(self) -> Path:
        return self.data_directory / "token"

    def get(self, name: str) -> str:
        """
        Look up a setting by the camelCase key the platform SDK uses.
        """
        keys = {
            "balenaUrl": self.balena_url,
            "apiUrl": self.api_url,
            "vpnUrl": self.vpn_url,
            "registryUrl": self.registry_url,
            "deltaUrl": self.delta_url,
            "dashboardUrl": self.dashboard_url,
            "dataDirectory": str(self.data_directory),
        }
        try:
            return keys[name]
        except KeyError:
            raise NotFound(f"Setting not found: {name}", {"name": name}) from None


def _read_rc(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"{path} must contain a mapping", {"path": str(path)})
    return data


def _from_mapping(base: Settings, data: Mapping[str, Any]) -> Settings:
    updates: dict[str, Any] = {}
    if data.get("balenaUrl"):
        updates["balena_url"] = str(data["balenaUrl"])
    if data.get("dataDirectory"):
        updates["data_directory"] = Path(str(data["dataDirectory"])).expanduser()
    if data.get("proxy"):
        updates["proxy"] = str(data["proxy"])
    if data.get("requestTimeout"):
        try:
            updates["request_timeout"] = float(data["requestTimeout"])
        except (TypeError, ValueError):
            raise ValidationError(
                "requestTimeout must be a number",
                {"requestTimeout": data["requestTimeout"]},
            ) from None
    return replace(base, **updates) if updates else base


def load_settings(
    environ: Optional[Mapping[str, str]] = None, rc_path: Optional[Path] = None
) -> Settings:
    env = os.environ if environ is None else environ
    settings = Settings()
    settings = _from_mapping(settings, _read_rc(rc_path or Path.home() / ".balenarc.yml"))

    # BALENARC_BALENA_URL -> balenaUrl, BALENARC_DATA_DIRECTORY -> dataDirectory
    overrides: dict[str, Any] = {}
    for key, value in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        head, *rest = key[len(ENV_PREFIX) :].lower().split("_")
        overrides[head + "".join(p.capitalize() for p in rest)] = value
    settings = _from_mapping(settings, overrides)

    root_ca = env.get(ENV_ROOT_CA)
    token = env.get(ENV_API_KEY)
    if not token and settings.token_file.exists():
        token = settings.token_file.read_text(encoding="utf-8").strip() or None

    return replace(
        settings,
        token=token,
        root_ca_path=Path(root_ca).expanduser() if root_ca else None,
        debug=bool(env.get(ENV_DEBUG)),
    )
