"""STM32 doodle-jump serial protocol framing.

Frames carry no length prefix, terminator or checksum. The first byte is an
ASCII digit naming the frame kind and the kind alone fixes the frame length:

    '0' screen update   [0][80 x 2-char tile tokens][score:3][difficulty:1][lost:1]
    '1' save blob       [1][opaque payload...]
    '2' load request    [2][opaque payload...]

In the multi-part revision a screen update carries a quarter of the grid:

    '0' screen part     [0][20 x 2-char tile tokens][part index:1]

Any byte count beyond the expected length is treated as corruption; there is
no attempt to resynchronise inside a frame.
"""

from dataclasses import dataclass
from enum import Enum

from .tiles import GRID_CELLS, TOKEN_WIDTH


class FrameKind(Enum):
    SCREEN_UPDATE = b"0"
    SAVE_BLOB = b"1"
    LOAD_REQUEST = b"2"

    @property
    def marker(self) -> bytes:
        return self.value


class ProtocolRevision(Enum):
    SINGLE = "single"
    MULTIPART = "multipart"


MARKER_SIZE = 1

# Single-frame screen update layout
TILES_OFFSET = MARKER_SIZE
TILES_SIZE = GRID_CELLS * TOKEN_WIDTH
SCORE_OFFSET = TILES_OFFSET + TILES_SIZE
SCORE_SIZE = 3
DIFFICULTY_OFFSET = SCORE_OFFSET + SCORE_SIZE
LOSE_FLAG_OFFSET = DIFFICULTY_OFFSET + 1
SCREEN_FRAME_SIZE = LOSE_FLAG_OFFSET + 1

# Multi-part screen update layout (body excludes the marker)
PART_COUNT = 4
PART_TILES = GRID_CELLS // PART_COUNT
PART_TOKENS_SIZE = PART_TILES * TOKEN_WIDTH
PART_BODY_SIZE = PART_TOKENS_SIZE + 1
PART_FRAME_SIZE = MARKER_SIZE + PART_BODY_SIZE

SAVE_FRAME_SIZE = 416
LOAD_FRAME_SIZE = 13

FRAME_LENGTHS: dict[ProtocolRevision, dict[FrameKind, int]] = {
    ProtocolRevision.SINGLE: {
        FrameKind.SCREEN_UPDATE: SCREEN_FRAME_SIZE,
        FrameKind.SAVE_BLOB: SAVE_FRAME_SIZE,
        FrameKind.LOAD_REQUEST: LOAD_FRAME_SIZE,
    },
    ProtocolRevision.MULTIPART: {
        FrameKind.SCREEN_UPDATE: PART_FRAME_SIZE,
        FrameKind.SAVE_BLOB: SAVE_FRAME_SIZE,
        FrameKind.LOAD_REQUEST: LOAD_FRAME_SIZE,
    },
}

_KINDS_BY_MARKER = {kind.marker[0]: kind for kind in FrameKind}


class ProtocolError(Exception):
    """Base class for recoverable stream errors."""


class UnknownFrameKind(ProtocolError):
    def __init__(self, marker: int) -> None:
        self.marker = marker
        super().__init__(f"unknown frame kind marker 0x{marker:02x}")


class FrameOverflow(ProtocolError):
    def __init__(self, kind: FrameKind, expected: int, actual: int) -> None:
        self.kind = kind
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{kind.name.lower()} frame overflow: expected {expected} bytes, got {actual}"
        )


class OutOfSequencePart(ProtocolError):
    def __init__(self, expected: int, observed: int | None) -> None:
        self.expected = expected
        self.observed = observed
        super().__init__(f"screen part out of sequence: expected {expected}, got {observed}")


class MalformedNumericField(ProtocolError):
    def __init__(self, field: str, raw: bytes) -> None:
        self.field = field
        self.raw = raw
        super().__init__(f"malformed {field} field: {raw!r}")


@dataclass(frozen=True)
class RawFrame:
    """A complete frame as received, marker included."""

    kind: FrameKind
    data: bytes

    @property
    def payload(self) -> bytes:
        return self.data[MARKER_SIZE:]


class FrameAccumulator:
    """Stateful accumulator turning arbitrary chunks into complete frames."""

    def __init__(self, lengths: dict[FrameKind, int] | None = None) -> None:
        if lengths is None:
            lengths = FRAME_LENGTHS[ProtocolRevision.SINGLE]
        missing = [kind.name for kind in FrameKind if kind not in lengths]
        if missing:
            raise ValueError(f"no frame length for {', '.join(missing)}")
        self._lengths = dict(lengths)
        self._buffer = bytearray()
        self._kind: FrameKind | None = None

    @property
    def kind(self) -> FrameKind | None:
        """Kind of the frame in progress, or None between frames."""
        return self._kind

    @property
    def pending(self) -> int:
        """Number of bytes buffered for the frame in progress."""
        return len(self._buffer)

    @property
    def remaining(self) -> int | None:
        """Bytes still needed to complete the frame in progress."""
        if self._kind is None:
            return None
        return self._lengths[self._kind] - len(self._buffer)

    def reset(self) -> None:
        self._buffer.clear()
        self._kind = None

    def feed(self, data: bytes) -> RawFrame | None:
        """
        Feed one chunk, return the frame it completes (if any).

        Raises UnknownFrameKind if a new frame starts with an unknown marker
        and FrameOverflow if the chunk runs past the expected length. The
        accumulator is reset in both cases.
        """
        if not data:
            return None

        if self._kind is None:
            kind = _KINDS_BY_MARKER.get(data[0])
            if kind is None:
                raise UnknownFrameKind(data[0])
            self._kind = kind

        self._buffer.extend(data)
        kind = self._kind
        expected = self._lengths[kind]
        actual = len(self._buffer)

        if actual > expected:
            self.reset()
            raise FrameOverflow(kind, expected, actual)

        if actual < expected:
            return None

        frame = RawFrame(kind, bytes(self._buffer))
        self.reset()
        return frame
