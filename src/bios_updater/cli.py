"""CLI for the BIOS updater.

Provides a one-shot update check meant to be run by an external
scheduler (cron, systemd timer), plus a configuration check.
"""

import asyncio
import logging
import sys
from typing import Optional

import click

from bios_updater.config import (
    ConfigLoader,
    ConfigurationError,
    check_download_path,
    missing_fields,
    parse_config,
    validate_config,
)
from bios_updater.firmware.models import Device
from bios_updater.notifier import MqttError, MqttPublisher
from bios_updater.updater import DeviceOutcome, run_updater

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """BIOS updater CLI."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (YAML or JSON)"
)
@click.option(
    "--no-notify",
    is_flag=True,
    help="Skip the MQTT connection and notifications"
)
def check(config_path: Optional[str], no_notify: bool):
    """Check all configured motherboards for BIOS updates."""
    try:
        config = ConfigLoader(config_path).load()
        check_download_path(config)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    publisher = None
    if not no_notify:
        publisher = MqttPublisher(config.broker)
        try:
            publisher.connect()
        except MqttError as e:
            logger.error(str(e))
            sys.exit(1)

    try:
        summary = asyncio.run(run_updater(config, publisher=publisher))
    except Exception as e:
        logger.error(f"BIOS check failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        if publisher is not None:
            publisher.close()

    updates = summary.count(DeviceOutcome.UPDATE_AVAILABLE)
    if updates:
        click.echo(f"✓ {updates} BIOS update(s) found")
    else:
        click.echo("✓ No BIOS updates available")
    sys.exit(0)


@cli.command("validate-config")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (YAML or JSON)"
)
def validate_config_command(config_path: Optional[str]):
    """Validate the configuration without any network access."""
    loader = ConfigLoader(config_path)

    try:
        raw = loader.load_raw()
    except ConfigurationError as e:
        click.echo(f"✗ {e}")
        sys.exit(1)

    if not validate_config(raw):
        click.echo(f"✗ Configuration is missing: {', '.join(missing_fields(raw))}")
        sys.exit(1)

    try:
        config = parse_config(raw)
    except ConfigurationError as e:
        click.echo(f"✗ {e}")
        sys.exit(1)

    click.echo(f"✓ Configuration {loader.loaded_from} is valid")
    for index, entry in enumerate(config.mobos):
        try:
            if not Device.is_valid_entry(entry):
                raise ValueError("name, currentVersion and apiEndPoint are required")
            device = Device.model_validate(entry)
        except ValueError as e:
            click.echo(f"  ✗ entry #{index} is malformed and will be skipped: {e}")
            continue
        click.echo(f"  ✓ {device.name} (current BIOS {device.current_version})")
    sys.exit(0)


if __name__ == "__main__":
    cli()
