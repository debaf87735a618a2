"""Tile tokens and screen grid geometry.

Each grid cell travels as a two-character ASCII token. Tokens not in the
table decode to Tile.UNKNOWN; the link carries no checksum, so a corrupt
cell must never stop the display.
"""

from dataclasses import dataclass
from enum import Enum

GRID_ROWS = 20
GRID_COLUMNS = 4
GRID_CELLS = GRID_ROWS * GRID_COLUMNS
TOKEN_WIDTH = 2


class Tile(Enum):
    AIR = "air"
    DOODLER_UP = "doodler_up"
    DOODLER_DOWN = "doodler_down"
    DIZZY_DOODLER_UP = "dizzy_doodler_up"
    NORMAL_STEP = "normal_step"
    BROKEN_STEP = "broken_step"
    SPRING_STEP = "spring_step"
    MONSTER = "monster"
    BLACK_HOLE = "black_hole"
    BULLET = "bullet"
    UNKNOWN = "unknown"

    @property
    def is_empty(self) -> bool:
        """Return True if the cell draws nothing."""
        return self in (Tile.AIR, Tile.UNKNOWN)


TILE_TOKENS: dict[bytes, Tile] = {
    b"20": Tile.AIR,
    b"00": Tile.DOODLER_UP,
    b"01": Tile.DOODLER_DOWN,
    b"02": Tile.NORMAL_STEP,
    b"03": Tile.BROKEN_STEP,
    b"04": Tile.SPRING_STEP,
    b"05": Tile.MONSTER,
    b"06": Tile.BLACK_HOLE,
    b"07": Tile.DIZZY_DOODLER_UP,
    b"a5": Tile.BULLET,
}


def tile_for_token(token: bytes) -> Tile:
    """Map a two-byte token to its tile, falling back to UNKNOWN."""
    return TILE_TOKENS.get(bytes(token), Tile.UNKNOWN)


def decode_tiles(data: bytes) -> tuple[Tile, ...]:
    """Decode a run of tokens into tiles, preserving order."""
    if len(data) % TOKEN_WIDTH:
        raise ValueError(f"token run of {len(data)} bytes is not a multiple of {TOKEN_WIDTH}")
    return tuple(
        tile_for_token(data[i : i + TOKEN_WIDTH])
        for i in range(0, len(data), TOKEN_WIDTH)
    )


@dataclass(frozen=True)
class ScreenGrid:
    """The 20x4 game grid, row-major."""

    cells: tuple[Tile, ...]

    def __post_init__(self) -> None:
        if len(self.cells) != GRID_CELLS:
            raise ValueError(f"screen grid needs {GRID_CELLS} cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> "ScreenGrid":
        return cls((Tile.AIR,) * GRID_CELLS)

    def rows(self) -> list[tuple[Tile, ...]]:
        return [
            self.cells[r * GRID_COLUMNS : (r + 1) * GRID_COLUMNS]
            for r in range(GRID_ROWS)
        ]
