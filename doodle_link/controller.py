"""Dispatch of decoded frames and outbound gestures."""

import logging
import time
from collections.abc import Callable

from .commands import LOAD_APPROVE, Gesture, gesture_command, loading_command
from .decoder import LoadRequest, SaveBlob, ScreenUpdateFrame
from .mqtt_handler import MqttHandler
from .protocol import FrameKind
from .render import render_screen
from .storage import SaveStore
from .tiles import ScreenGrid

logger = logging.getLogger(__name__)

# Pause between load-approve and the loading payload
LOAD_APPROVE_DELAY = 0.01  # seconds


class DeviceController:
    """Routes decoded frames to the store, renderer and MQTT surface."""

    def __init__(
        self,
        write: Callable[[bytes], None],
        store: SaveStore,
        mqtt: MqttHandler | None = None,
        show: Callable[[str], None] | None = None,
    ) -> None:
        self._write = write
        self._store = store
        self._mqtt = mqtt
        self._show = show
        self._lost = False

    def send_gesture(self, gesture: Gesture) -> None:
        logger.info("Gesture: %s", gesture.value)
        self._write(gesture_command(gesture))

    def handle(self, item: ScreenUpdateFrame | ScreenGrid | SaveBlob | LoadRequest) -> None:
        if isinstance(item, (ScreenUpdateFrame, ScreenGrid)):
            self._handle_screen(item)
        elif isinstance(item, SaveBlob):
            try:
                self._store.save(item.payload)
            except OSError as e:
                logger.error("Failed to save game data: %s", e)
        elif isinstance(item, LoadRequest):
            self.send_saved_game()

    def report_error(self, error: Exception | None) -> None:
        if self._mqtt is not None:
            self._mqtt.publish_status(error)

    def send_saved_game(self) -> bool:
        """Answer a load request; returns False if nothing was saved."""
        payload = self._store.load()
        if payload is None:
            logger.info("Load requested but no saved game exists")
            return False

        self._write(LOAD_APPROVE)
        time.sleep(LOAD_APPROVE_DELAY)
        # the device expects the save frame back exactly as it sent it
        self._write(loading_command(FrameKind.SAVE_BLOB.marker + payload))
        logger.info("Sent saved game: %d bytes", len(payload))
        return True

    def _handle_screen(self, screen: ScreenUpdateFrame | ScreenGrid) -> None:
        lost = isinstance(screen, ScreenUpdateFrame) and screen.lost
        if lost and not self._lost:
            logger.info("Game over (score %s)", screen.score)
        self._lost = lost
        if self._show is not None:
            self._show(render_screen(screen))
        if self._mqtt is not None:
            self._mqtt.publish_screen(screen)
