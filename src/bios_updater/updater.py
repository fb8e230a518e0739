"""BIOS update checker.

Walks the configured motherboards one at a time: look up the latest BIOS
from the vendor API, compare it with the recorded version, then download
it and publish an alert when it is newer. Problems with one device are
logged and the run moves on to the next; only a bad configuration stops
the run.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple, Union

import httpx

from bios_updater import console
from bios_updater.config.models import UpdaterConfig, parse_config
from bios_updater.firmware.downloader import DownloadManager
from bios_updater.firmware.evaluator import evaluate_update
from bios_updater.firmware.models import Device, UpdateStatus
from bios_updater.firmware.vendor_api import ApiResponseError, VendorApiClient
from bios_updater.notifier.notifier import Notifier, Publisher

logger = logging.getLogger(__name__)


class DeviceOutcome(str, Enum):
    """Result of checking a single device."""

    SKIPPED = "skipped"
    FAILED = "failed"
    UP_TO_DATE = "up_to_date"
    UPDATE_AVAILABLE = "update_available"


@dataclass
class RunSummary:
    """Per-device outcomes of one run."""

    results: List[Tuple[str, DeviceOutcome]] = field(default_factory=list)
    downloaded: List[str] = field(default_factory=list)
    notified: List[str] = field(default_factory=list)

    def count(self, outcome: DeviceOutcome) -> int:
        return sum(1 for _, o in self.results if o == outcome)


class BiosUpdater:
    """Checks every configured device for a newer BIOS.

    Example:
        >>> updater = BiosUpdater(config, publisher=mqtt_publisher)
        >>> try:
        ...     summary = await updater.run()
        ... finally:
        ...     await updater.close()
    """

    def __init__(
        self,
        config: UpdaterConfig,
        publisher: Optional[Publisher] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize updater.

        Args:
            config: Validated configuration
            publisher: Message channel client; notifications are skipped
                when None
            client: HTTP client to use; one is created (and later closed)
                when not given
        """
        self.config = config

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=config.request_timeout_sec)

        self.api = VendorApiClient(
            self.client,
            request_timeout=config.request_timeout_sec,
            download_timeout=config.download_timeout_sec,
        )
        self.downloads = DownloadManager(config.download_path, self.api)
        self.notifier = Notifier(publisher, config.mqtt_title) if publisher is not None else None

    async def run(self) -> RunSummary:
        """Check all devices in configured order."""
        summary = RunSummary()

        logger.info(f"Checking {len(self.config.mobos)} device(s) for BIOS updates")

        for index, entry in enumerate(self.config.mobos):
            name = entry.get("name") if isinstance(entry, dict) else None
            outcome = await self.check_device(entry, summary)
            summary.results.append((str(name) if name else f"#{index}", outcome))

        logger.info(
            f"BIOS check finished: "
            f"{summary.count(DeviceOutcome.UPDATE_AVAILABLE)} update(s), "
            f"{summary.count(DeviceOutcome.UP_TO_DATE)} up to date, "
            f"{summary.count(DeviceOutcome.SKIPPED)} skipped, "
            f"{summary.count(DeviceOutcome.FAILED)} failed"
        )
        return summary

    async def check_device(self, entry: Any, summary: RunSummary) -> DeviceOutcome:
        """Check one raw device entry and act on a newer BIOS.

        Args:
            entry: Raw device entry from the configuration
            summary: Run summary that collects downloads and notifications

        Returns:
            Outcome for this device
        """
        if not Device.is_valid_entry(entry):
            logger.warning(f"Malformed mobo entry, skipping: {entry!r}")
            return DeviceOutcome.SKIPPED

        try:
            device = Device.model_validate(entry)
        except ValueError as e:
            logger.warning(f"Malformed mobo entry, skipping: {e}")
            return DeviceOutcome.SKIPPED

        try:
            firmware = await self.api.fetch_latest(device.api_endpoint)
            status = evaluate_update(device.current_version, firmware.version)
        except ApiResponseError as e:
            logger.error(f"Something went wrong fetching the BIOS information for {device.name}: {e}")
            return DeviceOutcome.FAILED
        except ValueError as e:
            logger.error(f"Cannot compare BIOS versions for {device.name}: {e}")
            return DeviceOutcome.FAILED

        if status == UpdateStatus.UP_TO_DATE:
            logger.info(f"BIOS for {device.name} is up to date ({device.current_version})")
            console.up_to_date(device)
            return DeviceOutcome.UP_TO_DATE

        logger.info(
            f"BIOS update available for {device.name}: "
            f"{device.current_version} -> {firmware.version}"
        )
        firmware = firmware.model_copy(
            update={"file_path": self.downloads.get_file_path(device, firmware)}
        )
        console.new_bios_alert(device, firmware)

        try:
            if await self.downloads.download(device, firmware):
                summary.downloaded.append(device.name)
        except Exception as e:
            logger.error(
                f"Something went wrong fetching a BIOS for {device.name}: {e} "
                f"(mobo={device.to_payload()}, lastBios={firmware.model_dump(by_alias=True)})",
                exc_info=True,
            )

        if self.notifier is not None:
            try:
                self.notifier.notify(device, firmware)
                summary.notified.append(device.name)
            except Exception as e:
                logger.error(f"Failed to publish BIOS alert for {device.name}: {e}")

        return DeviceOutcome.UPDATE_AVAILABLE

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()


async def run_updater(
    config: Union[UpdaterConfig, Any],
    publisher: Optional[Publisher] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> RunSummary:
    """Validate the configuration and run one BIOS check.

    Raises:
        ConfigurationError: If the configuration is malformed; raised
            before any network access
    """
    if not isinstance(config, UpdaterConfig):
        config = parse_config(config)

    updater = BiosUpdater(config, publisher=publisher, client=client)
    try:
        return await updater.run()
    finally:
        await updater.close()
