"""Pytest configuration and shared fixtures."""

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

API_URL = "https://vendor.example.com/api/v3/BIOS?model=X570"
DOWNLOAD_URL = "https://dlcdn.example.com/pub/BIOS/X570-1203.zip"


def make_api_response(
    version: Any = "1203",
    download_url: str = DOWNLOAD_URL,
    description: str = "<p>Improve M.2 compatibility. Fixes  boot issue.</p>",
) -> Dict[str, Any]:
    """Build a vendor API response with a single BIOS file."""
    return {
        "Status": "SUCCESS",
        "Message": "",
        "Result": {
            "Count": 1,
            "Obj": [
                {
                    "Name": "BIOS",
                    "Count": 1,
                    "Files": [
                        {
                            "Id": "BIOS1203",
                            "Version": version,
                            "Title": f"PRIME X570-PRO BIOS {version}",
                            "Description": description,
                            "FileSize": "12.06 MBytes",
                            "ReleaseDate": "2020/09/23",
                            "IsRelease": "1",
                            "DownloadUrl": {
                                "Global": download_url,
                                "China": None,
                            },
                        }
                    ],
                }
            ],
        },
    }


class FakePublisher:
    """Records published messages instead of talking to a broker."""

    def __init__(self, fail: bool = False):
        self.messages: List[tuple] = []
        self.fail = fail

    def publish(self, topic: str, payload: str) -> None:
        if self.fail:
            raise RuntimeError("mqtt_not_connected")
        self.messages.append((topic, payload))


class MockVendor:
    """Serves canned responses by URL and records every request."""

    def __init__(self, routes: Optional[Dict[str, Callable[[httpx.Request], httpx.Response]]] = None):
        self.routes = routes or {}
        self.requests: List[httpx.Request] = []

    def json(self, url: str, body: Any, status_code: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status_code, json=body)

    def binary(self, url: str, content: bytes, status_code: int = 200) -> None:
        self.routes[url] = lambda request: httpx.Response(status_code, content=content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        return route(request)

    def calls(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def download_dir(tmp_path):
    """Provide an existing download directory."""
    path = tmp_path / "biosFiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def raw_config(download_dir):
    """Provide a complete raw configuration with one device."""
    return {
        "downloadPath": str(download_dir),
        "mqttTitle": "newBiosAlert",
        "mobos": [
            {
                "name": "X570",
                "currentVersion": 1201,
                "apiEndPoint": API_URL,
            }
        ],
        "broker": {
            "host": "broker.local",
            "username": "bios",
            "password": "secret",
        },
    }


@pytest.fixture
def vendor():
    """Provide a mock vendor serving one BIOS listing and its file."""
    mock = MockVendor()
    mock.json(API_URL, make_api_response())
    mock.binary(DOWNLOAD_URL, b"PK\x03\x04bios-image")
    return mock


@pytest.fixture
def publisher():
    return FakePublisher()
