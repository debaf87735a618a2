"""Per-connection receive session: accumulate, decode, reassemble."""

import logging
import threading

from .config import ProtocolConfig
from .decoder import DecodedFrame, ScreenUpdateFrame, decode
from .parts import PartReassembler
from .protocol import (
    FRAME_LENGTHS,
    FrameAccumulator,
    FrameKind,
    ProtocolError,
    ProtocolRevision,
)
from .tiles import ScreenGrid

logger = logging.getLogger(__name__)

Screen = ScreenUpdateFrame | ScreenGrid


class ScreenLink:
    """
    Receive side of one serial link.

    Every chunk is processed to completion under a lock, so readers of
    latest_screen and error only ever see a finished frame. Protocol errors
    are not raised to the caller; they are logged and exposed via error
    until the next clean chunk.
    """

    def __init__(self, config: ProtocolConfig | None = None) -> None:
        self._config = config or ProtocolConfig()
        self._accumulator = FrameAccumulator(FRAME_LENGTHS[self._config.revision])
        self._reassembler = PartReassembler()
        self._lock = threading.Lock()
        self._latest: Screen | None = None
        self._error: ProtocolError | None = None

    @property
    def revision(self) -> ProtocolRevision:
        return self._config.revision

    @property
    def latest_screen(self) -> Screen | None:
        """Most recent complete screen, untouched by erroring chunks."""
        with self._lock:
            return self._latest

    @property
    def error(self) -> ProtocolError | None:
        """Error raised by the last chunk, or None if it was accepted."""
        with self._lock:
            return self._error

    @property
    def wanted(self) -> int:
        """
        Largest read that cannot run past the current frame.

        Between frames only the marker byte is wanted, since the frame
        length is unknown until it arrives.
        """
        with self._lock:
            remaining = self._accumulator.remaining
        return 1 if remaining is None else remaining

    def reset(self) -> None:
        """Drop partial frame and reassembly state."""
        with self._lock:
            self._accumulator.reset()
            self._reassembler.reset()

    def feed(self, data: bytes) -> list[DecodedFrame | ScreenGrid]:
        """Process one chunk, return whatever it completed."""
        with self._lock:
            try:
                decoded = self._process(data)
            except ProtocolError as e:
                logger.warning("Protocol error: %s", e)
                self._error = e
                return []

            self._error = None
            for item in decoded:
                if isinstance(item, ScreenUpdateFrame) and item.errors:
                    for problem in item.errors:
                        logger.warning("Protocol error: %s", problem)
                    self._error = item.errors[0]
                if isinstance(item, (ScreenUpdateFrame, ScreenGrid)):
                    self._latest = item
            return decoded

    def _process(self, data: bytes) -> list[DecodedFrame | ScreenGrid]:
        frame = self._accumulator.feed(data)
        if frame is None:
            return []

        logger.debug("Received %s frame: %d bytes", frame.kind.name, len(frame.data))

        if (
            frame.kind is FrameKind.SCREEN_UPDATE
            and self._config.revision is ProtocolRevision.MULTIPART
        ):
            grid = self._reassembler.feed(frame.payload)
            return [grid] if grid is not None else []

        return [decode(frame, strict=self._config.strict_numeric)]
