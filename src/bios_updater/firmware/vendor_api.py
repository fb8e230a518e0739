"""Vendor BIOS API access and response validation."""

import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from bios_updater.firmware.models import FirmwareRecord

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "SUCCESS"
REQUIRED_FILE_FIELDS = ("Version", "FileSize", "Description", "DownloadUrl")
DOWNLOAD_CHUNK_SIZE = 65536


class ApiResponseError(Exception):
    """Raised when a vendor response cannot be turned into a FirmwareRecord."""


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _latest_file(response: Any) -> Optional[dict]:
    """Walk ``Result.Obj[0].Files[0]``, returning None at the first missing link."""
    if not isinstance(response, dict):
        return None
    if response.get("Status") != SUCCESS_STATUS:
        return None

    result = response.get("Result")
    if not isinstance(result, dict):
        return None

    obj = _first(result.get("Obj"))
    if not isinstance(obj, dict):
        return None

    latest = _first(obj.get("Files"))
    if not isinstance(latest, dict):
        return None

    return latest


def validate_api_response(response: Any) -> bool:
    """Check a vendor response is safe to extract a FirmwareRecord from.

    The status must equal "SUCCESS" and every link of
    ``Result.Obj[0].Files[0]`` must be present, along with the file's
    Version, FileSize, Description, DownloadUrl and DownloadUrl.Global.
    HTTP status codes are not considered here.
    """
    latest = _latest_file(response)
    if latest is None:
        return False

    if not all(latest.get(field) for field in REQUIRED_FILE_FIELDS):
        return False

    download_url = latest.get("DownloadUrl")
    return isinstance(download_url, dict) and bool(download_url.get("Global"))


def parse_firmware_record(response: Any) -> FirmwareRecord:
    """Decode a raw vendor response into a FirmwareRecord.

    Raises:
        ApiResponseError: If the response does not have the required shape
    """
    if not validate_api_response(response):
        raise ApiResponseError("Vendor response is missing required BIOS fields")

    try:
        return FirmwareRecord.model_validate(_latest_file(response))
    except ValueError as e:
        raise ApiResponseError(f"Vendor response has invalid BIOS fields: {e}") from e


class VendorApiClient:
    """Fetches BIOS listings and firmware files over HTTP.

    Wraps a shared ``httpx.AsyncClient``. No authentication headers are
    sent; the vendor endpoints are public.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        request_timeout: float = 60.0,
        download_timeout: float = 300.0,
    ):
        self.client = client
        self.request_timeout = request_timeout
        self.download_timeout = download_timeout

    async def fetch_listing(self, api_endpoint: str) -> Any:
        """GET a device's API endpoint and return the decoded JSON body.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
            ValueError: If the body is not JSON
        """
        logger.debug(f"Fetching BIOS listing from {api_endpoint}")

        response = await self.client.get(api_endpoint, timeout=self.request_timeout)
        response.raise_for_status()

        return response.json()

    async def fetch_latest(self, api_endpoint: str) -> FirmwareRecord:
        """Fetch a device's listing and decode the latest firmware record.

        Raises:
            ApiResponseError: If the request fails or the response is malformed
        """
        try:
            listing = await self.fetch_listing(api_endpoint)
        except (httpx.HTTPError, ValueError) as e:
            raise ApiResponseError(f"Request to {api_endpoint} failed: {e}") from e

        return parse_firmware_record(listing)

    async def download(self, url: str, destination: Path) -> int:
        """Stream a firmware file into ``destination``.

        The file is only created once the server answers with a 2xx
        status. A transfer that breaks off midway leaves a truncated file.

        Args:
            url: Firmware download URL
            destination: File to create or overwrite

        Returns:
            Number of bytes written

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
            OSError: If the file cannot be written
        """
        downloaded = 0

        async with self.client.stream(
            "GET",
            url,
            timeout=self.download_timeout,
            follow_redirects=True,
        ) as response:
            response.raise_for_status()

            with open(destination, "wb") as f:
                async for chunk in response.aiter_bytes(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
                    downloaded += len(chunk)

        return downloaded
