"""New BIOS notifications."""

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from bios_updater.firmware.description import collapse_description, normalize_description
from bios_updater.firmware.models import Device, FirmwareRecord

logger = logging.getLogger(__name__)

PAYLOAD_SCHEMA_VERSION = 1


class Publisher(Protocol):
    """Anything that can publish a text payload to a topic."""

    def publish(self, topic: str, payload: str) -> None:
        ...


class BiosPayload(BaseModel):
    """Firmware part of a notification."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(..., alias="Version")
    title: str = Field(..., alias="Title")
    release_date: str = Field(..., alias="ReleaseDate")
    file_size: str = Field(..., alias="FileSize")
    description: str = Field(..., alias="Description", description="Markup stripped")
    html_description: str = Field(..., alias="HTMLDescription")
    download_url: str = Field(..., alias="DownloadUrl")
    file_path: Optional[str] = Field(default=None, alias="filePath")
    notes: List[str] = Field(default_factory=list)


class NotificationPayload(BaseModel):
    """Message published when a newer BIOS is found.

    Consumers should check ``schema_version`` before reading other keys.
    """

    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = PAYLOAD_SCHEMA_VERSION
    mobo: dict
    last_bios: BiosPayload = Field(..., alias="lastBios")

    @classmethod
    def build(
        cls,
        device: Device,
        firmware: FirmwareRecord,
        file_path: Optional[Path] = None,
    ) -> "NotificationPayload":
        path = file_path or firmware.file_path
        return cls(
            mobo=device.to_payload(),
            last_bios=BiosPayload(
                version=firmware.version,
                title=firmware.title,
                release_date=firmware.release_date,
                file_size=firmware.file_size,
                description=collapse_description(firmware.description),
                html_description=firmware.description,
                download_url=firmware.download_url,
                file_path=str(path) if path is not None else None,
                notes=normalize_description(firmware.description),
            ),
        )

    def to_json(self) -> str:
        return json.dumps(self.model_dump(by_alias=True))


class Notifier:
    """Publishes new BIOS alerts to a single topic."""

    def __init__(self, publisher: Publisher, topic: str):
        """Initialize notifier.

        Args:
            publisher: Connected message channel client
            topic: Topic that receives alerts
        """
        self.publisher = publisher
        self.topic = topic

    def notify(self, device: Device, firmware: FirmwareRecord) -> None:
        """Publish a new BIOS alert.

        Publisher errors propagate to the caller.
        """
        payload = NotificationPayload.build(device, firmware)
        self.publisher.publish(self.topic, payload.to_json())
        logger.info(f"Published new BIOS alert for {device.name} to {self.topic}")
