"""Periodic clock transmission to the device."""

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from .commands import clock_command

logger = logging.getLogger(__name__)


class ClockSender:
    """Sends the wall clock to the device at a fixed interval."""

    def __init__(
        self,
        write: Callable[[bytes], None],
        interval: float,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._write = write
        self._interval = interval
        self._now = now
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def send_now(self) -> None:
        self._write(clock_command(self._now()))

    def start(self) -> None:
        if self._interval <= 0:
            logger.info("Clock sync disabled")
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="clock-sender", daemon=True)
        self._thread.start()
        logger.info("Clock sync every %gs", self._interval)

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _run(self) -> None:
        # first sync goes out immediately
        while True:
            self.send_now()
            if self._stop.wait(self._interval):
                return
