"""BIOS file download management.

Downloads are named ``{download_path}/{device}-{version}.zip`` so the
local name does not depend on the vendor's URL layout. A file already at
that path counts as downloaded; nothing is fetched again.
"""

import logging
from pathlib import Path

from bios_updater import console
from bios_updater.firmware.models import Device, FirmwareRecord
from bios_updater.firmware.vendor_api import VendorApiClient

logger = logging.getLogger(__name__)


class DownloadManager:
    """Fetches BIOS files into the download directory.

    The directory must already exist. The existence check and the write
    are not atomic, so two overlapping runs could both download the same
    file.
    """

    def __init__(self, download_path: str, api: VendorApiClient):
        """Initialize download manager.

        Args:
            download_path: Existing directory that receives BIOS files; "~" is
                expanded
            api: Client used to fetch file contents
        """
        self.download_path = Path(download_path).expanduser()
        self.api = api

    def get_file_path(self, device: Device, firmware: FirmwareRecord) -> Path:
        return self.download_path / f"{device.name}-{firmware.version}.zip"

    def download_exists(self, device: Device, firmware: FirmwareRecord) -> bool:
        return self.get_file_path(device, firmware).exists()

    async def download(self, device: Device, firmware: FirmwareRecord) -> bool:
        """Download a BIOS file unless it is already on disk.

        A failed write may leave a truncated file behind; it is not
        cleaned up.

        Args:
            device: Device the firmware belongs to
            firmware: Firmware record to download

        Returns:
            True if the file was downloaded by this call, False if it
            already existed

        Raises:
            httpx.HTTPError: If the download fails
            OSError: If the file cannot be written
        """
        file_path = self.get_file_path(device, firmware)

        if file_path.exists():
            logger.info(f"{file_path} already downloaded")
            console.already_downloaded()
            return False

        console.downloading(firmware.model_copy(update={"file_path": file_path}))
        logger.info(f"Downloading {firmware.download_url} to {file_path}")

        size = await self.api.download(firmware.download_url, file_path)

        logger.info(f"Downloaded {size} bytes to {file_path}")
        console.downloaded()
        return True
