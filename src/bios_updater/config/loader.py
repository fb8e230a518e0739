"""Configuration file loader."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from bios_updater.config.models import ConfigurationError, UpdaterConfig, parse_config

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BIOS_UPDATER_CONFIG"


class ConfigLoader:
    """Loads the updater configuration from a YAML or JSON file."""

    DEFAULT_CONFIG_PATHS = [
        "/etc/bios-updater/config.yaml",
        "./config/config.yaml",
        "~/.config/bios-updater/config.yaml",
        "./config.json",
    ]

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to configuration file (optional). Falls back to
                the BIOS_UPDATER_CONFIG environment variable, then to the
                default locations.
        """
        self.config_path = config_path or os.environ.get(CONFIG_ENV_VAR)
        self.loaded_from: Optional[Path] = None
        self.raw: Dict[str, Any] = {}

    def load_raw(self) -> Dict[str, Any]:
        """Read the first existing configuration file.

        Returns:
            Parsed configuration data

        Raises:
            ConfigurationError: If no file exists or it cannot be parsed
        """
        if self.config_path:
            paths = [self.config_path]
        else:
            paths = self.DEFAULT_CONFIG_PATHS

        for path in paths:
            expanded_path = Path(path).expanduser()
            if not expanded_path.exists():
                continue

            try:
                with open(expanded_path, "r", encoding="utf-8") as f:
                    if expanded_path.suffix == ".json":
                        data = json.load(f)
                    else:
                        data = yaml.safe_load(f)
            except (OSError, ValueError, yaml.YAMLError) as e:
                raise ConfigurationError(
                    f"Error loading config from {expanded_path}: {e}"
                ) from e

            logger.info(f"Loaded configuration from {expanded_path}")
            self.loaded_from = expanded_path
            self.raw = data if data is not None else {}
            return self.raw

        raise ConfigurationError(
            f"No configuration file found (tried: {', '.join(paths)})"
        )

    def load(self) -> UpdaterConfig:
        """Load and validate the configuration.

        Raises:
            ConfigurationError: If the file is missing or malformed
        """
        return parse_config(self.load_raw())


def check_download_path(config: UpdaterConfig) -> Path:
    """Ensure the download directory exists; it is never created here.

    Raises:
        ConfigurationError: If the directory is missing
    """
    path = Path(config.download_path).expanduser()
    if not path.is_dir():
        raise ConfigurationError(f"Download directory does not exist: {path}")
    return path
