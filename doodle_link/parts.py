"""Reassembly of screen updates split into four ordered parts."""

from .protocol import (
    PART_BODY_SIZE,
    PART_COUNT,
    PART_TOKENS_SIZE,
    OutOfSequencePart,
)
from .tiles import ScreenGrid, Tile, decode_tiles


class PartReassembler:
    """Collects parts 0..3 in order and emits the full grid."""

    def __init__(self) -> None:
        self._expected = 0
        self._tiles: list[Tile] = []

    @property
    def expected(self) -> int:
        """Index of the next part to accept."""
        return self._expected

    def reset(self) -> None:
        self._expected = 0
        self._tiles.clear()

    def feed(self, part: bytes) -> ScreenGrid | None:
        """
        Accept one part body (marker stripped).

        Returns the completed grid after part 3, None otherwise. Raises
        OutOfSequencePart and drops the partial grid if the index does
        not match.
        """
        if len(part) != PART_BODY_SIZE:
            raise ValueError(f"screen part must be {PART_BODY_SIZE} bytes, got {len(part)}")

        trailer = part[PART_TOKENS_SIZE:]
        observed = int(trailer) if trailer.isdigit() else None
        if observed != self._expected:
            expected = self._expected
            self.reset()
            raise OutOfSequencePart(expected, observed)

        self._tiles.extend(decode_tiles(part[:PART_TOKENS_SIZE]))

        if observed < PART_COUNT - 1:
            self._expected += 1
            return None

        grid = ScreenGrid(tuple(self._tiles))
        self.reset()
        return grid
