"""Tests for vendor API validation and access."""

import copy

import httpx
import pytest

from bios_updater.firmware.models import FirmwareRecord
from bios_updater.firmware.vendor_api import (
    ApiResponseError,
    VendorApiClient,
    parse_firmware_record,
    validate_api_response,
)
from conftest import API_URL, DOWNLOAD_URL, MockVendor, make_api_response


def _drop(response, *path):
    """Remove the key or list item at ``path`` from a copy of ``response``."""
    broken = copy.deepcopy(response)
    target = broken
    for step in path[:-1]:
        target = target[step]
    if isinstance(target, list):
        target.clear()
    else:
        del target[path[-1]]
    return broken


class TestValidateApiResponse:
    """Test the nested response shape check."""

    def test_complete_response_accepted(self):
        assert validate_api_response(make_api_response()) is True

    def test_missing_global_url_rejected(self):
        response = _drop(make_api_response(), "Result", "Obj", 0, "Files", 0, "DownloadUrl", "Global")
        assert validate_api_response(response) is False

    def test_failed_status_rejected(self):
        response = make_api_response()
        response["Status"] = "ERROR"
        assert validate_api_response(response) is False

    @pytest.mark.parametrize(
        "path",
        [
            ("Result",),
            ("Result", "Obj"),
            ("Result", "Obj", 0),
            ("Result", "Obj", 0, "Files"),
            ("Result", "Obj", 0, "Files", 0),
            ("Result", "Obj", 0, "Files", 0, "Version"),
            ("Result", "Obj", 0, "Files", 0, "FileSize"),
            ("Result", "Obj", 0, "Files", 0, "Description"),
            ("Result", "Obj", 0, "Files", 0, "DownloadUrl"),
        ],
    )
    def test_missing_link_rejected(self, path):
        response = _drop(make_api_response(), *path)
        assert validate_api_response(response) is False

    def test_non_object_inputs_rejected(self):
        assert validate_api_response(None) is False
        assert validate_api_response("SUCCESS") is False
        assert validate_api_response({"Status": "SUCCESS", "Result": {"Obj": "x"}}) is False


class TestParseFirmwareRecord:
    """Test decoding the latest firmware record."""

    def test_parse_valid_response(self):
        record = parse_firmware_record(make_api_response())

        assert isinstance(record, FirmwareRecord)
        assert record.version == "1203"
        assert record.file_size == "12.06 MBytes"
        assert record.title == "PRIME X570-PRO BIOS 1203"
        assert record.release_date == "2020/09/23"
        assert record.download_url == DOWNLOAD_URL
        assert record.file_path is None

    def test_numeric_version_becomes_string(self):
        record = parse_firmware_record(make_api_response(version=1203))
        assert record.version == "1203"

    def test_only_first_file_used(self):
        response = make_api_response()
        newer = copy.deepcopy(response["Result"]["Obj"][0]["Files"][0])
        newer["Version"] = "9999"
        response["Result"]["Obj"][0]["Files"].append(newer)

        assert parse_firmware_record(response).version == "1203"

    def test_invalid_response_raises(self):
        with pytest.raises(ApiResponseError):
            parse_firmware_record({"Status": "SUCCESS"})


class TestVendorApiClient:
    """Test HTTP access to the vendor API."""

    @pytest.mark.asyncio
    async def test_fetch_latest(self, vendor):
        async with vendor.client() as client:
            api = VendorApiClient(client)
            record = await api.fetch_latest(API_URL)

        assert record.version == "1203"
        assert vendor.calls(API_URL) == 1

    @pytest.mark.asyncio
    async def test_http_error_becomes_api_error(self):
        mock = MockVendor()
        mock.json(API_URL, {"error": "down"}, status_code=503)

        async with mock.client() as client:
            with pytest.raises(ApiResponseError):
                await VendorApiClient(client).fetch_latest(API_URL)

    @pytest.mark.asyncio
    async def test_non_json_body_becomes_api_error(self):
        mock = MockVendor({API_URL: lambda request: httpx.Response(200, text="<html>")})

        async with mock.client() as client:
            with pytest.raises(ApiResponseError):
                await VendorApiClient(client).fetch_latest(API_URL)

    @pytest.mark.asyncio
    async def test_malformed_listing_becomes_api_error(self):
        mock = MockVendor()
        mock.json(API_URL, {"Status": "SUCCESS", "Result": {"Obj": []}})

        async with mock.client() as client:
            with pytest.raises(ApiResponseError):
                await VendorApiClient(client).fetch_latest(API_URL)

    @pytest.mark.asyncio
    async def test_download_streams_to_file(self, vendor, tmp_path):
        destination = tmp_path / "X570-1203.zip"

        async with vendor.client() as client:
            size = await VendorApiClient(client).download(DOWNLOAD_URL, destination)

        assert size == len(b"PK\x03\x04bios-image")
        assert destination.read_bytes() == b"PK\x03\x04bios-image"

    @pytest.mark.asyncio
    async def test_download_larger_than_one_chunk(self, tmp_path):
        payload = bytes(range(256)) * 1024  # 256 KiB, several chunks
        mock = MockVendor()
        mock.binary(DOWNLOAD_URL, payload)
        destination = tmp_path / "big.zip"

        async with mock.client() as client:
            size = await VendorApiClient(client).download(DOWNLOAD_URL, destination)

        assert size == len(payload)
        assert destination.read_bytes() == payload

    @pytest.mark.asyncio
    async def test_download_failure_creates_no_file(self, tmp_path):
        mock = MockVendor()
        destination = tmp_path / "X570-1203.zip"

        async with mock.client() as client:
            with pytest.raises(httpx.HTTPStatusError):
                await VendorApiClient(client).download(DOWNLOAD_URL, destination)

        assert not destination.exists()
