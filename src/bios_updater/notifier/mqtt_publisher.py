"""MQTT publisher used to broadcast BIOS update notifications."""

import logging
import threading
from typing import Optional

import paho.mqtt.client as mqtt

from bios_updater.config.models import BrokerConfig

logger = logging.getLogger(__name__)


class MqttError(Exception):
    """Raised when the broker connection or a publish fails."""


class MqttPublisher:
    """Connect-once, publish-many MQTT client.

    Example:
        >>> publisher = MqttPublisher(config.broker)
        >>> publisher.connect()
        >>> publisher.publish("newBiosAlert", '{"schema_version": 1}')
        >>> publisher.close()
    """

    def __init__(
        self,
        broker: BrokerConfig,
        connect_timeout: float = 10.0,
        publish_timeout: float = 10.0,
    ):
        self.broker = broker
        self.connect_timeout = connect_timeout
        self.publish_timeout = publish_timeout

        self._client: Optional[mqtt.Client] = None
        self._connected = threading.Event()
        self._connect_error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None and self._connected.is_set()

    def connect(self) -> None:
        """Open the broker connection and wait for the CONNACK.

        Raises:
            MqttError: If the broker is unreachable or refuses the login
        """
        client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=self.broker.client_id,
        )
        client.username_pw_set(self.broker.username, self.broker.password)
        if self.broker.tls:
            client.tls_set()
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect

        logger.info(f"Connecting to MQTT broker {self.broker.host}:{self.broker.port}")

        try:
            client.connect(self.broker.host, self.broker.port, keepalive=self.broker.keepalive)
        except (OSError, ValueError) as e:
            raise MqttError(f"Cannot reach MQTT broker {self.broker.host}: {e}") from e

        client.loop_start()
        self._client = client

        if not self._connected.wait(self.connect_timeout) or self._connect_error:
            reason = self._connect_error or "timed out waiting for CONNACK"
            self.close()
            raise MqttError(f"MQTT connection to {self.broker.host} failed: {reason}")

        logger.info("MQTT connected")

    def publish(self, topic: str, payload: str) -> None:
        """Publish a message with QoS 1 and wait until it is sent.

        Raises:
            MqttError: If not connected or the publish is rejected
        """
        if not self.is_connected:
            raise MqttError("mqtt_not_connected")

        info = self._client.publish(topic, payload=payload, qos=1, retain=False)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise MqttError(f"Failed to publish to '{topic}' (rc={info.rc})")

        try:
            info.wait_for_publish(timeout=self.publish_timeout)
        except (RuntimeError, ValueError) as e:
            raise MqttError(f"Failed to publish to '{topic}': {e}") from e

        if not info.is_published():
            raise MqttError(f"Timed out publishing to '{topic}'")

    def close(self) -> None:
        client = self._client
        self._client = None
        self._connected.clear()
        if client is None:
            return

        try:
            client.disconnect()
        finally:
            client.loop_stop()
        logger.info("MQTT connection closed")

    def _on_connect(self, client, _userdata, _flags, reason_code, properties=None):
        if reason_code.is_failure:
            self._connect_error = str(reason_code)
            logger.error(f"MQTT broker refused connection: {reason_code}")
        else:
            self._connect_error = None
        self._connected.set()

    def _on_disconnect(self, client, _userdata, _flags, reason_code, properties=None):
        if reason_code.is_failure:
            logger.warning(f"MQTT disconnected unexpectedly: {reason_code}")
