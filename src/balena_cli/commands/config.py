from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

import typer

from balena_core.config import (
    ApplicationConfigRequest,
    DeviceConfigRequest,
    GenerateApplicationConfig,
    GenerateDeviceConfig,
)
from balena_core.errors import BalenaError
from balena_core.models import GENERATE_DEVICE_KEY, ConfigOptions
from balena_core.result import Result
from balena_core.types import ConfigurationObject

from ..bootstrap import AppContext
from ..utils.console import report
from ..utils.fs import write_file


def add_generate_arguments(parser: argparse.ArgumentParser) -> None:
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--application", "-a", type=int, help="Application id")
    target.add_argument("--device", "-d", help="Device uuid")
    parser.add_argument("--version", required=True, help="balenaOS version, e.g. 2.29.2")

    key = parser.add_mutually_exclusive_group()
    key.add_argument("--device-api-key", "-k", help="Custom device key (with --device)")
    key.add_argument(
        "--generate-device-api-key",
        action="store_true",
        help="Generate a fresh device key (with --device)",
    )

    parser.add_argument("--device-type", help="Override the device type")
    parser.add_argument(
        "--network", choices=("ethernet", "wifi"), default="ethernet"
    )
    parser.add_argument("--wifi-ssid", help="Wi-Fi SSID (with --network wifi)")
    parser.add_argument("--wifi-key", help="Wi-Fi key (with --network wifi)")
    parser.add_argument(
        "--app-update-poll-interval",
        type=int,
        metavar="MINUTES",
        help="How often the device checks for updates",
    )
    parser.add_argument(
        "--ssh-key",
        action="append",
        default=[],
        help="Public SSH key to add to the host OS (repeatable)",
    )
    parser.add_argument("--output", "-o", type=Path, help="Write config to this file")


def options_from_args(args: argparse.Namespace) -> ConfigOptions:
    return ConfigOptions(
        version=args.version,
        app_update_poll_interval=args.app_update_poll_interval,
        device_type=args.device_type,
        ssh_keys=tuple(args.ssh_key),
        network=args.network,
        wifi_ssid=args.wifi_ssid,
        wifi_key=args.wifi_key,
    )


async def generate_config(
    context: AppContext, args: argparse.Namespace
) -> Result[ConfigurationObject, BalenaError]:
    options = options_from_args(args)
    async with context.open_platform() as platform:
        if args.device:
            device_api_key = (
                GENERATE_DEVICE_KEY if args.generate_device_api_key else args.device_api_key
            )
            device_uc = GenerateDeviceConfig(
                platform,
                context.clock,
                root_ca_path=context.settings.root_ca_path,
                logger=context.logger,
            )
            return await device_uc.execute(
                DeviceConfigRequest(args.device, options, device_api_key)
            )
        app_uc = GenerateApplicationConfig(
            platform,
            root_ca_path=context.settings.root_ca_path,
            logger=context.logger,
        )
        return await app_uc.execute(ApplicationConfigRequest(args.application, options))


def config_generate_cmd(args: argparse.Namespace, context: AppContext) -> int:
    """
    Generate a config.json for an application or a device.
    """

    def emit(config: ConfigurationObject) -> int:
        text = json.dumps(config, indent=4) + "\n"
        if args.output is None:
            typer.echo(text, nl=False)
        else:
            write_file(args.output, text)
            typer.echo(f"Config written to {args.output}")
        return 0

    result = asyncio.run(generate_config(context, args))
    return result.fold(emit, report)
