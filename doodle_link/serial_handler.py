"""Serial port handler for the doodle-jump device link."""

import logging
import threading
import time

import serial

from .config import SerialConfig

logger = logging.getLogger(__name__)

# Reconnection settings
RECONNECT_DELAY_MIN = 1  # seconds
RECONNECT_DELAY_MAX = 60  # seconds


class SerialHandler:
    """Handles raw serial I/O with the game board."""

    def __init__(self, config: SerialConfig) -> None:
        self._config = config
        self._port: serial.SerialBase | None = None
        self._write_lock = threading.Lock()
        self._reconnect_delay = RECONNECT_DELAY_MIN

    @property
    def connected(self) -> bool:
        """Return True if serial port is open."""
        return self._port is not None and self._port.is_open

    def open(self) -> None:
        """Open the serial port (device path or pyserial URL)."""
        self._port = serial.serial_for_url(
            self._config.port,
            baudrate=self._config.baud,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            timeout=0.1,  # 100ms read timeout for polling
            write_timeout=self._config.write_timeout,
        )
        self._reconnect_delay = RECONNECT_DELAY_MIN  # Reset backoff on success
        logger.info(
            "Opened serial port %s at %d baud",
            self._config.port,
            self._config.baud,
        )

    def close(self) -> None:
        """Close the serial port."""
        if self._port and self._port.is_open:
            self._port.close()
            logger.info("Closed serial port")
        self._port = None

    def try_reconnect(self) -> bool:
        """
        Attempt to reconnect to the serial port.

        Returns True if reconnection successful, False otherwise.
        Uses exponential backoff between attempts.
        """
        self.close()

        logger.info(
            "Attempting serial reconnection in %d seconds...",
            self._reconnect_delay,
        )
        time.sleep(self._reconnect_delay)

        try:
            self.open()
            return True
        except serial.SerialException as e:
            logger.warning("Serial reconnection failed: %s", e)
            # Exponential backoff
            self._reconnect_delay = min(
                self._reconnect_delay * 2,
                RECONNECT_DELAY_MAX,
            )
            return False

    def read_chunk(self, limit: int) -> bytes:
        """
        Read up to limit available bytes.

        Returns b"" if nothing arrived within the read timeout.
        Raises SerialDisconnected if the port is no longer available; the
        port is closed first so the caller can reconnect.
        """
        if not self.connected:
            return b""

        try:
            data = self._port.read(min(self._port.in_waiting or 1, limit))
        except serial.SerialException as e:
            logger.error("Serial read error: %s", e)
            self.close()
            raise SerialDisconnected() from e

        if data:
            logger.debug("Read %d bytes from serial", len(data))
        return data

    def write_command(self, data: bytes) -> None:
        """Write a command to the serial port (thread-safe)."""
        if not self.connected:
            logger.warning("Cannot write: serial port not open")
            return

        try:
            with self._write_lock:
                self._port.write(data)
            logger.debug("Sent command to serial: %r", data[:23])
        except serial.SerialException as e:
            logger.error("Serial write error: %s", e)
            # Don't raise here - let the main loop detect via read_chunk


class SerialDisconnected(Exception):
    """Raised when serial port becomes unavailable."""

    pass
