"""BIOS firmware lookup, comparison and download."""

from bios_updater.firmware.description import collapse_description, normalize_description
from bios_updater.firmware.downloader import DownloadManager
from bios_updater.firmware.evaluator import evaluate_update
from bios_updater.firmware.models import Device, FirmwareRecord, UpdateStatus
from bios_updater.firmware.vendor_api import (
    ApiResponseError,
    VendorApiClient,
    parse_firmware_record,
    validate_api_response,
)

__all__ = [
    "ApiResponseError",
    "Device",
    "DownloadManager",
    "FirmwareRecord",
    "UpdateStatus",
    "VendorApiClient",
    "collapse_description",
    "evaluate_update",
    "normalize_description",
    "parse_firmware_record",
    "validate_api_response",
]
