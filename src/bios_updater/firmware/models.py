"""Firmware update domain models."""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UpdateStatus(str, Enum):
    """Outcome of comparing local and remote firmware versions."""

    UP_TO_DATE = "up to date"
    UPDATE_AVAILABLE = "update available"


class Device(BaseModel):
    """A motherboard tracked for BIOS updates."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1)
    current_version: int = Field(..., alias="currentVersion")
    api_endpoint: str = Field(..., alias="apiEndPoint", min_length=1)

    @classmethod
    def is_valid_entry(cls, entry: Any) -> bool:
        """Check a raw device entry has a name, endpoint and non-zero version."""
        return bool(
            isinstance(entry, dict)
            and entry.get("currentVersion")
            and entry.get("name")
            and entry.get("apiEndPoint")
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class FirmwareRecord(BaseModel):
    """Latest firmware file descriptor reported by the vendor API.

    Built from ``Result.Obj[0].Files[0]`` of a validated response. The
    version stays a string as the vendor sends it; comparison parses it
    (see ``evaluate_update``).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    version: str = Field(..., alias="Version", min_length=1)
    file_size: str = Field(..., alias="FileSize")
    title: str = Field(default="", alias="Title")
    release_date: str = Field(default="", alias="ReleaseDate")
    description: str = Field(..., alias="Description")
    download_url: str = Field(..., alias="DownloadUrl")

    # Set by the download manager once the local path is known
    file_path: Optional[Path] = None

    @field_validator("version", "file_size", "title", "release_date", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> Any:
        """The vendor sends some of these as numbers."""
        if v is None:
            return ""
        return str(v)

    @field_validator("download_url", mode="before")
    @classmethod
    def extract_global_url(cls, v: Any) -> Any:
        """``DownloadUrl`` is an object keyed by region; use ``Global``."""
        if isinstance(v, dict):
            return v.get("Global")
        return v
