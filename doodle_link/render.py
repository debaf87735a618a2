"""Plain-text rendering of decoded screens."""

from .decoder import ScreenUpdateFrame
from .tiles import ScreenGrid, Tile

EMPTY_GLYPH = " "

GLYPHS = {
    Tile.DOODLER_UP: "A",
    Tile.DOODLER_DOWN: "V",
    Tile.DIZZY_DOODLER_UP: "@",
    Tile.NORMAL_STEP: "=",
    Tile.BROKEN_STEP: "~",
    Tile.SPRING_STEP: "S",
    Tile.MONSTER: "M",
    Tile.BLACK_HOLE: "O",
    Tile.BULLET: "*",
}


def _glyph(tile: Tile) -> str:
    return EMPTY_GLYPH if tile.is_empty else GLYPHS[tile]


def render_grid(grid: ScreenGrid) -> str:
    return "\n".join(
        "|" + "".join(_glyph(tile) for tile in row) + "|" for row in grid.rows()
    )


def _field(value: int | None) -> str:
    return "?" if value is None else str(value)


def render_screen(screen: ScreenUpdateFrame | ScreenGrid) -> str:
    """Render a screen with a score header when one is available."""
    if isinstance(screen, ScreenGrid):
        return render_grid(screen)

    lines = [f"score {_field(screen.score)}  level {_field(screen.difficulty)}"]
    if screen.lost:
        lines.append("GAME OVER")
    lines.append(render_grid(screen.grid))
    return "\n".join(lines)
