"""Message channel notifications for new BIOS releases."""

from bios_updater.notifier.mqtt_publisher import MqttError, MqttPublisher
from bios_updater.notifier.notifier import (
    PAYLOAD_SCHEMA_VERSION,
    NotificationPayload,
    Notifier,
    Publisher,
)

__all__ = [
    "MqttError",
    "MqttPublisher",
    "NotificationPayload",
    "Notifier",
    "PAYLOAD_SCHEMA_VERSION",
    "Publisher",
]
