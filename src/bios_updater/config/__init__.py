"""Configuration loading and validation."""

from bios_updater.config.loader import ConfigLoader, check_download_path
from bios_updater.config.models import (
    BrokerConfig,
    ConfigurationError,
    UpdaterConfig,
    missing_fields,
    parse_config,
    validate_config,
)

__all__ = [
    "BrokerConfig",
    "ConfigLoader",
    "ConfigurationError",
    "UpdaterConfig",
    "check_download_path",
    "missing_fields",
    "parse_config",
    "validate_config",
]
