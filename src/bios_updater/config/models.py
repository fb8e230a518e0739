"""Configuration models and validation."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BrokerConfig(BaseModel):
    """MQTT broker connection parameters."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    host: str = Field(..., min_length=1, description="Broker hostname")
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    port: int = Field(default=1883, ge=1, le=65535)
    tls: bool = Field(default=False, description="Connect over TLS")
    client_id: str = Field(default="", alias="clientId")
    keepalive: int = Field(default=60, ge=5)


class UpdaterConfig(BaseModel):
    """Top-level updater configuration.

    Field names follow the camelCase keys of the configuration file
    through aliases. Device entries are kept raw so that a malformed
    entry can be skipped during a run instead of rejecting the whole
    configuration.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    download_path: str = Field(..., alias="downloadPath", min_length=1)
    mqtt_title: str = Field(..., alias="mqttTitle", min_length=1)
    mobos: List[Any] = Field(..., min_length=1, description="Raw device entries")
    broker: BrokerConfig

    # HTTP timeouts (seconds)
    request_timeout_sec: float = Field(default=60.0, alias="requestTimeout", gt=0)
    download_timeout_sec: float = Field(default=300.0, alias="downloadTimeout", gt=0)


class ConfigurationError(Exception):
    """Raised when the configuration cannot be used for a run."""


def validate_config(config: Any) -> bool:
    """Check that a configuration candidate has the minimum required shape.

    Args:
        config: Untyped configuration data (usually a parsed YAML/JSON dict)

    Returns:
        True if download path, topic name, a non-empty device list and
        complete broker credentials are all present
    """
    if not isinstance(config, dict):
        return False

    broker = config.get("broker")
    if not isinstance(broker, dict):
        return False

    mobos = config.get("mobos")

    return bool(
        config.get("downloadPath")
        and config.get("mqttTitle")
        and isinstance(mobos, list)
        and mobos
        and broker.get("host")
        and broker.get("username")
        and broker.get("password")
    )


def parse_config(config: Any) -> UpdaterConfig:
    """Validate raw configuration data and build an UpdaterConfig.

    Raises:
        ConfigurationError: If the data is malformed
    """
    if not validate_config(config):
        raise ConfigurationError("Configuration object is malformed")

    try:
        return UpdaterConfig.model_validate(config)
    except ValueError as e:
        raise ConfigurationError(f"Configuration object is malformed: {e}") from e


def missing_fields(config: Any) -> List[str]:
    """List the required configuration keys that are absent or empty."""
    if not isinstance(config, dict):
        return ["<root>"]

    missing = [
        key for key in ("downloadPath", "mqttTitle")
        if not config.get(key)
    ]

    mobos = config.get("mobos")
    if not isinstance(mobos, list) or not mobos:
        missing.append("mobos")

    broker: Optional[dict] = config.get("broker")
    if not isinstance(broker, dict):
        missing.append("broker")
    else:
        missing.extend(
            f"broker.{key}" for key in ("host", "username", "password")
            if not broker.get(key)
        )

    return missing
