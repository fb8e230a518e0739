"""Human-facing console output."""

from typing import Optional

import click

from bios_updater.firmware.description import normalize_description
from bios_updater.firmware.models import Device, FirmwareRecord


def key_value(key: str, value: Optional[str] = None) -> None:
    """Print a coloured ``key value`` line."""
    click.echo(f"{click.style(key or '', fg='cyan')} {click.style(value or '', fg='blue')}")


def up_to_date(device: Device) -> None:
    click.secho(
        f"Your current BIOS for {device.name} {device.current_version}, is up to date",
        fg="green",
    )


def new_bios_alert(device: Device, firmware: FirmwareRecord) -> None:
    """Print the release details of a newer BIOS.

    Args:
        device: Device that is out of date
        firmware: Latest firmware record, with ``file_path`` set
    """
    click.secho(
        f"Your current BIOS for {device.name} {device.current_version}, is not up to date",
        fg="red",
    )
    key_value("Release Date", firmware.release_date)
    key_value("Title", firmware.title)
    key_value("Description")
    key_value("URL", firmware.download_url)

    for note in normalize_description(firmware.description):
        click.secho(f"- {note}", fg="yellow")

    if firmware.file_path is not None and firmware.file_path.exists():
        key_value("Downloaded", str(firmware.file_path))


def downloading(firmware: FirmwareRecord) -> None:
    click.echo(f"Downloading {firmware.file_path} ({firmware.file_size})")


def downloaded() -> None:
    click.echo("Downloaded")


def already_downloaded() -> None:
    click.secho("Already Downloaded", fg="yellow")
