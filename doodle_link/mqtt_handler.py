"""MQTT remote display and controller surface."""

import json
import logging
from collections.abc import Callable

import paho.mqtt.client as mqtt

from .commands import Gesture
from .config import MqttConfig
from .decoder import ScreenUpdateFrame
from .tiles import ScreenGrid

logger = logging.getLogger(__name__)

# Reconnection settings
RECONNECT_DELAY_MIN = 1  # seconds
RECONNECT_DELAY_MAX = 120  # seconds


def screen_payload(screen: ScreenUpdateFrame | ScreenGrid) -> str:
    """Serialize a decoded screen as JSON."""
    if isinstance(screen, ScreenGrid):
        grid, score, difficulty, lost = screen, None, None, False
    else:
        grid, score, difficulty, lost = (
            screen.grid,
            screen.score,
            screen.difficulty,
            screen.lost,
        )
    return json.dumps(
        {
            "rows": [[tile.value for tile in row] for row in grid.rows()],
            "score": score,
            "difficulty": difficulty,
            "lost": lost,
        }
    )


class MqttHandler:
    """Publishes screens and receives gestures over MQTT."""

    def __init__(
        self,
        config: MqttConfig,
        on_gesture: Callable[[Gesture], None],
    ) -> None:
        self._config = config
        self._on_gesture = on_gesture
        self._connected = False

        client_id = f"doodle-link-{config.device_id}"
        self._client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)
        self._client.on_connect = self._handle_connect
        self._client.on_disconnect = self._handle_disconnect
        self._client.on_message = self._handle_message

        # Enable automatic reconnection with exponential backoff
        self._client.reconnect_delay_set(RECONNECT_DELAY_MIN, RECONNECT_DELAY_MAX)

        if config.username:
            self._client.username_pw_set(config.username, config.password)

    @property
    def connected(self) -> bool:
        """Return True if currently connected to broker."""
        return self._connected

    @property
    def _base_topic(self) -> str:
        return f"{self._config.root_topic}/{self._config.device_id}"

    @property
    def screen_topic(self) -> str:
        return f"{self._base_topic}/screen"

    @property
    def status_topic(self) -> str:
        return f"{self._base_topic}/status"

    @property
    def control_topic(self) -> str:
        return f"{self._base_topic}/control"

    def connect(self) -> None:
        """Connect to MQTT broker and start network loop."""
        logger.info(
            "Connecting to MQTT broker %s:%d",
            self._config.broker,
            self._config.port,
        )
        self._client.connect(self._config.broker, self._config.port)
        self._client.loop_start()

    def disconnect(self) -> None:
        """Stop network loop and disconnect from broker."""
        self._client.loop_stop()
        self._client.disconnect()
        logger.info("Disconnected from MQTT broker")

    def publish_screen(self, screen: ScreenUpdateFrame | ScreenGrid) -> None:
        """Publish a decoded screen (retained, so late viewers see it)."""
        if not self._connected:
            logger.debug("Cannot publish: not connected to MQTT broker")
            return

        self._client.publish(self.screen_topic, screen_payload(screen), retain=True)
        logger.debug("Published screen to %s", self.screen_topic)

    def publish_status(self, error: Exception | None) -> None:
        """Publish the link error status; an empty message means healthy."""
        if not self._connected:
            return

        self._client.publish(self.status_topic, str(error) if error else "", retain=True)

    def _handle_connect(
        self,
        client: mqtt.Client,
        userdata: object,
        flags: mqtt.ConnectFlags,
        reason_code: mqtt.ReasonCode,
        properties: mqtt.Properties | None,
    ) -> None:
        if reason_code == 0:
            self._connected = True
            logger.info("Connected to MQTT broker")
            # Resubscribe on every connect (handles reconnection)
            client.subscribe(self.control_topic)
            logger.info("Subscribed to %s", self.control_topic)
        else:
            self._connected = False
            logger.error("MQTT connection failed: %s", reason_code)

    def _handle_disconnect(
        self,
        client: mqtt.Client,
        userdata: object,
        disconnect_flags: mqtt.DisconnectFlags,
        reason_code: mqtt.ReasonCode,
        properties: mqtt.Properties | None,
    ) -> None:
        self._connected = False
        if reason_code == 0:
            logger.info("Disconnected from MQTT broker (clean)")
        else:
            logger.warning(
                "Disconnected from MQTT broker: %s (will reconnect)",
                reason_code,
            )

    def _handle_message(
        self,
        client: mqtt.Client,
        userdata: object,
        msg: mqtt.MQTTMessage,
    ) -> None:
        if msg.topic != self.control_topic:
            return

        try:
            gesture = Gesture(msg.payload.decode("ascii").strip().lower())
        except (UnicodeDecodeError, ValueError):
            logger.warning("Ignoring unknown control message: %r", msg.payload)
            return

        logger.debug("Received gesture '%s'", gesture.value)
        self._on_gesture(gesture)
