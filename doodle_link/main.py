"""Main entry point for the doodle-jump companion link."""

import argparse
import logging
import signal
import sys
import time
from pathlib import Path

import serial

from .clock import ClockSender
from .config import Config, load_config
from .controller import DeviceController
from .link import ScreenLink
from .mqtt_handler import MqttHandler
from .serial_handler import SerialDisconnected, SerialHandler
from .storage import SaveStore

logger = logging.getLogger(__name__)

# Initial connection retry settings
INITIAL_RETRY_DELAY = 5  # seconds


def main() -> None:
    """Entry point for doodle-link command."""
    parser = argparse.ArgumentParser(
        description="Companion display and controller for the STM32 doodle-jump serial link"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print each decoded screen to stdout",
    )
    args = parser.parse_args()

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except FileNotFoundError:
        logger.error("Configuration file not found: %s", args.config)
        sys.exit(1)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)

    run(config, show=args.show)


def run(config: Config, show: bool = False) -> None:
    """Run the link with loaded configuration."""
    serial_handler = SerialHandler(config.serial)
    link = ScreenLink(config.protocol)
    clock = ClockSender(serial_handler.write_command, config.clock.interval)

    def on_gesture(gesture):
        controller.send_gesture(gesture)

    mqtt_handler = None
    if config.mqtt is not None:
        mqtt_handler = MqttHandler(config.mqtt, on_gesture=on_gesture)

    controller = DeviceController(
        write=serial_handler.write_command,
        store=SaveStore(config.storage.path),
        mqtt=mqtt_handler,
        show=print if show else None,
    )

    # Graceful shutdown
    shutdown_requested = False

    def handle_signal(signum, frame):
        nonlocal shutdown_requested
        logger.info("Shutdown requested")
        shutdown_requested = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        # Initial serial connection with retry
        while not shutdown_requested:
            try:
                serial_handler.open()
                break
            except serial.SerialException as e:
                logger.error(
                    "Failed to open serial port: %s (retrying in %ds)",
                    e,
                    INITIAL_RETRY_DELAY,
                )
                time.sleep(INITIAL_RETRY_DELAY)

        if shutdown_requested:
            return

        if mqtt_handler is not None:
            mqtt_handler.connect()
        clock.start()

        logger.info(
            "Link running: port=%s, protocol revision '%s'",
            config.serial.port,
            link.revision.value,
        )

        # Main loop: poll serial, decode, dispatch
        last_error = None
        while not shutdown_requested:
            if not serial_handler.connected:
                # Attempt reconnection
                if serial_handler.try_reconnect():
                    logger.info("Serial reconnected")
                continue

            try:
                data = serial_handler.read_chunk(link.wanted)
            except SerialDisconnected:
                logger.warning("Serial connection lost, will attempt reconnection")
                link.reset()
                continue

            if not data:
                continue

            for item in link.feed(data):
                controller.handle(item)

            error = link.error
            if error is not last_error:
                controller.report_error(error)
                last_error = error

    except Exception as e:
        logger.error("Unexpected error: %s", e)
        sys.exit(1)
    finally:
        clock.stop()
        if mqtt_handler is not None:
            mqtt_handler.disconnect()
        serial_handler.close()
        logger.info("Link stopped")


if __name__ == "__main__":
    main()
