"""Decoding of complete frames into screen updates and opaque blobs."""

from dataclasses import dataclass, field

from .protocol import (
    DIFFICULTY_OFFSET,
    LOSE_FLAG_OFFSET,
    SCORE_OFFSET,
    SCORE_SIZE,
    SCREEN_FRAME_SIZE,
    TILES_OFFSET,
    TILES_SIZE,
    FrameKind,
    MalformedNumericField,
    RawFrame,
)
from .tiles import ScreenGrid, decode_tiles

LOST = b"1"


@dataclass(frozen=True)
class ScreenUpdateFrame:
    grid: ScreenGrid
    score: int | None
    difficulty: int | None
    lost: bool
    errors: tuple[MalformedNumericField, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class SaveBlob:
    payload: bytes


@dataclass(frozen=True)
class LoadRequest:
    payload: bytes


DecodedFrame = ScreenUpdateFrame | SaveBlob | LoadRequest


def _parse_digits(name: str, raw: bytes, errors: list) -> int | None:
    # bytes.isdigit() accepts ASCII digits only, unlike int() which
    # tolerates signs, underscores and whitespace
    if raw.isdigit():
        return int(raw)
    errors.append(MalformedNumericField(name, raw))
    return None


def decode_screen(data: bytes, strict: bool = False) -> ScreenUpdateFrame:
    """
    Decode a single-frame screen update.

    Unknown tile tokens fall back to Tile.UNKNOWN. A score or difficulty
    that is not plain digits decodes as None and is reported in errors,
    or raised when strict is set. A lost game always yields an empty grid.
    """
    if len(data) != SCREEN_FRAME_SIZE:
        raise ValueError(
            f"screen update must be {SCREEN_FRAME_SIZE} bytes, got {len(data)}"
        )

    errors: list[MalformedNumericField] = []
    score = _parse_digits("score", data[SCORE_OFFSET : SCORE_OFFSET + SCORE_SIZE], errors)
    difficulty = _parse_digits(
        "difficulty", data[DIFFICULTY_OFFSET : DIFFICULTY_OFFSET + 1], errors
    )
    if strict and errors:
        raise errors[0]

    lost = data[LOSE_FLAG_OFFSET : LOSE_FLAG_OFFSET + 1] == LOST
    if lost:
        # the device stops sending tile state once the game is lost
        grid = ScreenGrid.empty()
    else:
        grid = ScreenGrid(decode_tiles(data[TILES_OFFSET : TILES_OFFSET + TILES_SIZE]))

    return ScreenUpdateFrame(
        grid=grid,
        score=score,
        difficulty=difficulty,
        lost=lost,
        errors=tuple(errors),
    )


def decode(frame: RawFrame, strict: bool = False) -> DecodedFrame:
    """Decode a complete single-frame revision frame."""
    if frame.kind is FrameKind.SCREEN_UPDATE:
        return decode_screen(frame.data, strict=strict)
    if frame.kind is FrameKind.SAVE_BLOB:
        return SaveBlob(frame.payload)
    if frame.kind is FrameKind.LOAD_REQUEST:
        return LoadRequest(frame.payload)
    raise ValueError(f"cannot decode frame kind {frame.kind!r}")
