"""Local vs remote BIOS version comparison."""

import re

from bios_updater.firmware.models import UpdateStatus

VERSION_PATTERN = re.compile(r"[0-9]+")


def parse_version(version: str) -> int:
    """Parse a vendor version string as a base-10 integer.

    Vendor BIOS versions are plain build numbers such as "1203". Anything
    that is not made only of ASCII digits (for example "1203a", "v2",
    " 1203" or "1_203") is not comparable and raises ValueError rather
    than being guessed at. The version also names the downloaded file, so
    only accepting plain digits keeps that name clean.
    """
    text = str(version)
    if not VERSION_PATTERN.fullmatch(text):
        raise ValueError(f"BIOS version is not a plain number: {text!r}")
    return int(text, 10)


def evaluate_update(current_version: int, remote_version: str) -> UpdateStatus:
    """Decide whether a newer BIOS is available.

    Args:
        current_version: Locally recorded BIOS version
        remote_version: Latest version reported by the vendor

    Returns:
        UP_TO_DATE if the local version is equal or newer, otherwise
        UPDATE_AVAILABLE

    Raises:
        ValueError: If the remote version is not made of ASCII digits only
    """
    if current_version >= parse_version(remote_version):
        return UpdateStatus.UP_TO_DATE
    return UpdateStatus.UPDATE_AVAILABLE
