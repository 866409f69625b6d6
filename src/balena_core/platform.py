from __future__ import annotations

from typing import Any, Optional

import httpx

from .errors import Conflict, InfraError, NotFound, PermissionDenied, ValidationError
from .models import Application, Device
from .ports import PlatformPort
from .settings import Settings
from .types import JSON

API_VERSION = "v6"

APPLICATION_FIELDS = "id,app_name,device_type"
DEVICE_FIELDS = "id,uuid,device_type,belongs_to__application"


class HttpPlatform(PlatformPort):
    """
    PlatformPort over the balena HTTP API.

    Use as an async context manager so the underlying connection pool is
    closed when the command finishes:

        async with HttpPlatform(settings) as platform:
            await platform.whoami()
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        headers = {"Accept": "application/json"}
        if settings.token:
            headers["Authorization"] = f"Bearer {settings.token}"
        self._client = httpx.AsyncClient(
            base_url=settings.api_url,
            headers=headers,
            timeout=settings.request_timeout,
            proxy=settings.proxy,
            transport=transport,
        )
        self._whoami: Optional[JSON] = None

    async def __aenter__(self) -> "HttpPlatform":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # transport -----------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise InfraError(
                code="network_error",
                message=f"Could not reach {self.settings.api_url}: {exc}",
                details={"path": path},
            ) from exc

        if response.status_code in (401, 403):
            raise PermissionDenied(
                "You have to log in to continue"
                if response.status_code == 401
                else "You are not allowed to perform this action",
                {"path": path, "status": response.status_code},
            )
        if response.status_code == 404:
            raise NotFound(f"Not found: {path}", {"path": path})
        if response.status_code == 409:
            raise Conflict(
                response.text or "Conflict", {"path": path, "status": 409}
            )
        if response.status_code >= 400:
            raise InfraError(
                code="request_error",
                message=response.text or response.reason_phrase,
                details={"path": path, "status": response.status_code},
            )
        return response

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise InfraError(
                code="decode_error",
                message=f"Invalid JSON from {path}",
                details={"path": path},
            ) from exc

    async def _text(self, method: str, path: str, **kwargs: Any) -> str:
        response = await self._request(method, path, **kwargs)
        # key endpoints answer with a JSON-encoded string
        return response.text.strip().strip('"')

    async def _one(self, resource: str, params: JSON, label: str) -> JSON:
        data = await self._json("GET", f"/{API_VERSION}/{resource}", params=params)
        items = data.get("d") or []
        if not items:
            raise NotFound(f"{label} not found", dict(params))
        return items[0]

    # auth ------------------------------------------------------------------

    async def _user(self) -> JSON:
        if self._whoami is None:
            self._whoami = await self._json("GET", "/user/v1/whoami")
        return self._whoami

    async def get_user_id(self) -> int:
        return int((await self._user())["id"])

    async def whoami(self) -> str:
        return str((await self._user())["username"])

    # settings / config -----------------------------------------------------

    async def get_setting(self, name: str) -> str:
        return self.settings.get(name)

    async def get_api_config(self) -> JSON:
        return await self._json("GET", "/config")

    async def get_config_template(self, application_id: int, params: JSON) -> JSON:
        body = {"appId": application_id, **params}
        return await self._json("POST", "/download-config", json=body)

    # models ----------------------------------------------------------------

    async def get_application(self, application_id: int) -> Application:
        data = await self._one(
            "application",
            {"$filter": f"id eq {int(application_id)}", "$select": APPLICATION_FIELDS},
            f"Application {application_id}",
        )
        return Application.from_resource(data)

    async def get_device(self, uuid: str) -> Device:
        if not uuid or "'" in uuid:
            raise ValidationError(f"Invalid device uuid: {uuid!r}")
        data = await self._one(
            "device",
            {"$filter": f"uuid eq '{uuid}'", "$select": DEVICE_FIELDS},
            f"Device {uuid}",
        )
        return Device.from_resource(data)

    async def generate_application_key(self, application_id: int) -> str:
        return await self._text(
            "POST", f"/application/{int(application_id)}/generate-api-key"
        )

    async def generate_provisioning_key(self, application_id: int) -> str:
        return await self._text(
            "POST", f"/api-key/application/{int(application_id)}/provisioning"
        )

    async def generate_device_key(self, uuid: str) -> str:
        return await self._text("POST", f"/api-key/device/{uuid}/device-key")

    # environment variables -------------------------------------------------

    async def create_env_var(
        self,
        name: str,
        value: str,
        *,
        application_id: Optional[int] = None,
        device_uuid: Optional[str] = None,
        config: bool = False,
    ) -> None:
        if (application_id is None) == (device_uuid is None):
            raise ValidationError(
                "Exactly one of application or device must be specified"
            )
        kind = "config_variable" if config else "environment_variable"
        if device_uuid is not None:
            device = await self.get_device(device_uuid)
            resource, body = f"device_{kind}", {"device": device.id}
        else:
            resource, body = f"application_{kind}", {"application": application_id}
        body.update({"name": name, "value": value})
        await self._request("POST", f"/{API_VERSION}/{resource}", json=body)

    async def remove_env_var(
        self, var_id: int, *, device: bool = False, config: bool = False
    ) -> None:
        owner = "device" if device else "application"
        kind = "config_variable" if config else "environment_variable"
        await self._request(
            "DELETE", f"/{API_VERSION}/{owner}_{kind}({int(var_id)})"
        )
