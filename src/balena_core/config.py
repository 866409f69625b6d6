"""
Assemble config.json objects for applications and devices.

The base configuration is the platform's config template for the
application with the locally known user, endpoint and option values layered
on top. Exactly one credential is then attached: `apiKey` (application or
provisioning key) or `deviceApiKey`, chosen by the target OS version.
"""

from __future__ import annotations

import asyncio
import base64
import copy
import enum
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from packaging.version import Version

from .errors import ValidationError
from .log import StdLogger
from .models import GENERATE_DEVICE_KEY, Application, ConfigOptions, Device
from .ports import ClockPort, LoggerPort, PlatformPort
from .types import ConfigurationObject
from .use_case import AsyncUseCase
from .versions import VersionRule, parse_version, select


class KeyKind(enum.Enum):
    APPLICATION = "application"
    PROVISIONING = "provisioning"
    DEVICE = "device"


# Evaluated top to bottom; first match wins.
APPLICATION_KEY_RULES = (
    VersionRule(">=2.7.8", KeyKind.PROVISIONING),
    VersionRule("<2.7.8", KeyKind.APPLICATION),
)
DEVICE_KEY_RULES = (
    VersionRule(">=2.0.3", KeyKind.DEVICE),
    VersionRule("<2.0.3", KeyKind.APPLICATION),
)

NETWORKS = ("ethernet", "wifi")


def validate_options(options: ConfigOptions) -> Version:
    """
    Check options before any remote call is made. Returns the parsed version.
    """
    version = parse_version(options.version)
    if options.network not in NETWORKS:
        raise ValidationError(
            f"Unknown network type: {options.network!r}", {"network": options.network}
        )
    if options.network == "wifi" and not options.wifi_ssid:
        raise ValidationError("A Wi-Fi SSID is required for wifi networking")
    interval = options.app_update_poll_interval
    # 0 means no override
    if interval is not None and (
        isinstance(interval, bool) or not isinstance(interval, int) or interval < 0
    ):
        raise ValidationError(
            "appUpdatePollInterval must be a whole number of minutes",
            {"appUpdatePollInterval": interval},
        )
    return version


async def read_root_ca(path: Optional[Path]) -> Optional[str]:
    """
    Base64 of the PEM file at `path`, or None when unset or missing.
    Other read failures propagate.
    """
    if path is None:
        return None
    try:
        pem = await asyncio.to_thread(Path(path).read_bytes)
    except FileNotFoundError:
        return None
    return base64.b64encode(pem).decode("ascii")


async def generate_base_config(
    platform: PlatformPort,
    application: Application,
    options: ConfigOptions,
    *,
    root_ca_path: Optional[Path] = None,
) -> ConfigurationObject:
    validate_options(options)
    (
        user_id,
        username,
        api_url,
        vpn_url,
        registry_url,
        delta_url,
        api_config,
        template,
        root_ca,
    ) = await asyncio.gather(
        platform.get_user_id(),
        platform.whoami(),
        platform.get_setting("apiUrl"),
        platform.get_setting("vpnUrl"),
        platform.get_setting("registryUrl"),
        platform.get_setting("deltaUrl"),
        platform.get_api_config(),
        platform.get_config_template(application.id, options.template_params()),
        read_root_ca(root_ca_path),
    )

    config: ConfigurationObject = copy.deepcopy(template)
    config.update(
        {
            "applicationName": application.name,
            "applicationId": application.id,
            "deviceType": options.device_type or application.device_type,
            "userId": user_id,
            "username": username,
            "apiEndpoint": api_url,
            "vpnEndpoint": vpn_url,
            "registryEndpoint": registry_url,
            "deltaEndpoint": delta_url,
        }
    )

    if api_config.get("mixpanelToken") is not None:
        config["mixpanelToken"] = api_config["mixpanelToken"]
    pubnub = api_config.get("pubnub") or {}
    if pubnub.get("subscribe_key"):
        config["pubnubSubscribeKey"] = pubnub["subscribe_key"]
    if pubnub.get("publish_key"):
        config["pubnubPublishKey"] = pubnub["publish_key"]

    if options.poll_interval_ms:
        config["appUpdatePollInterval"] = options.poll_interval_ms
    if root_ca:
        config["balenaRootCA"] = root_ca

    if options.network == "wifi":
        config["wifiSsid"] = options.wifi_ssid
        if options.wifi_key:
            config["wifiKey"] = options.wifi_key
    else:
        config.pop("wifiSsid", None)
        config.pop("wifiKey", None)

    if options.ssh_keys:
        os_section = config.get("os") or {}
        config["os"] = os_section
        known = os_section.get("sshKeys") or []
        os_section["sshKeys"] = [*known, *options.ssh_keys]

    # the template may carry credentials of its own
    config.pop("apiKey", None)
    config.pop("deviceApiKey", None)
    return config


async def add_application_key(
    platform: PlatformPort, config: ConfigurationObject, application_id: int
) -> str:
    config["apiKey"] = await platform.generate_application_key(application_id)
    return config["apiKey"]


async def add_provisioning_key(
    platform: PlatformPort, config: ConfigurationObject, application_id: int
) -> str:
    config["apiKey"] = await platform.generate_provisioning_key(application_id)
    return config["apiKey"]


async def add_device_key(
    platform: PlatformPort,
    config: ConfigurationObject,
    uuid: str,
    device_api_key: str = GENERATE_DEVICE_KEY,
) -> str:
    if device_api_key == GENERATE_DEVICE_KEY:
        device_api_key = await platform.generate_device_key(uuid)
    config["deviceApiKey"] = device_api_key
    return device_api_key


async def generate_application_config(
    platform: PlatformPort,
    application: Application,
    options: ConfigOptions,
    *,
    root_ca_path: Optional[Path] = None,
    logger: Optional[LoggerPort] = None,
) -> ConfigurationObject:
    log = logger or StdLogger()
    kind = select(validate_options(options), APPLICATION_KEY_RULES)
    config = await generate_base_config(
        platform, application, options, root_ca_path=root_ca_path
    )
    log.debug("attaching key", kind=kind.value, version=options.version)
    if kind is KeyKind.PROVISIONING:
        await add_provisioning_key(platform, config, application.id)
    else:
        await add_application_key(platform, config, application.id)
    return config


async def generate_device_config(
    platform: PlatformPort,
    device: Device,
    device_api_key: Optional[str],
    options: ConfigOptions,
    *,
    clock: ClockPort,
    root_ca_path: Optional[Path] = None,
    logger: Optional[LoggerPort] = None,
) -> ConfigurationObject:
    log = logger or StdLogger()
    version = validate_options(options)
    if device_api_key:
        kind = KeyKind.DEVICE
    else:
        kind = select(version, DEVICE_KEY_RULES)
        device_api_key = GENERATE_DEVICE_KEY

    application = await platform.get_application(device.application_id)
    options = replace(options, device_type=options.device_type or device.device_type)
    config = await generate_base_config(
        platform, application, options, root_ca_path=root_ca_path
    )
    log.debug("attaching key", kind=kind.value, uuid=device.uuid)
    if kind is KeyKind.DEVICE:
        await add_device_key(platform, config, device.uuid, device_api_key)
    else:
        await add_application_key(platform, config, application.id)

    # Associate the device so the supervisor does not register a second one.
    config["registered_at"] = int(clock.now().timestamp())
    config["deviceId"] = device.id
    config["uuid"] = device.uuid
    return config


# Use cases --------------------------------------------------------------------


@dataclass
class ApplicationConfigRequest:
    application_id: int
    options: ConfigOptions


@dataclass
class DeviceConfigRequest:
    uuid: str
    options: ConfigOptions
    device_api_key: Optional[str] = None


class GenerateApplicationConfig(
    AsyncUseCase[ApplicationConfigRequest, ConfigurationObject]
):
    def __init__(
        self,
        platform: PlatformPort,
        *,
        root_ca_path: Optional[Path] = None,
        logger: Optional[LoggerPort] = None,
    ) -> None:
        self.platform = platform
        self.root_ca_path = root_ca_path
        self.logger = logger or StdLogger()

    async def avalidate(self, input: ApplicationConfigRequest) -> None:
        validate_options(input.options)

    async def aperform(self, input: ApplicationConfigRequest) -> ConfigurationObject:
        application = await self.platform.get_application(input.application_id)
        return await generate_application_config(
            self.platform,
            application,
            input.options,
            root_ca_path=self.root_ca_path,
            logger=self.logger,
        )


class GenerateDeviceConfig(AsyncUseCase[DeviceConfigRequest, ConfigurationObject]):
    def __init__(
        self,
        platform: PlatformPort,
        clock: ClockPort,
        *,
        root_ca_path: Optional[Path] = None,
        logger: Optional[LoggerPort] = None,
    ) -> None:
        self.platform = platform
        self.clock = clock
        self.root_ca_path = root_ca_path
        self.logger = logger or StdLogger()

    async def avalidate(self, input: DeviceConfigRequest) -> None:
        if not input.uuid:
            raise ValidationError("A device uuid is required")
        validate_options(input.options)

    async def aperform(self, input: DeviceConfigRequest) -> ConfigurationObject:
        device = await self.platform.get_device(input.uuid)
        return await generate_device_config(
            self.platform,
            device,
            input.device_api_key,
            input.options,
            clock=self.clock,
            root_ca_path=self.root_ca_path,
            logger=self.logger,
        )
