"""Helpers for ASCII level files and numpy views of the tile grid."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

import numpy as np

from chipbot.types import KeyColor, Position, Tile, TileStatus

GLYPHS: Dict[str, TileStatus] = {
    ".": TileStatus.EMPTY,
    "#": TileStatus.WALL,
    "~": TileStatus.WATER,
    "X": TileStatus.GOAL,
    "c": TileStatus.CHIP,
}
for _color in KeyColor:
    GLYPHS[_color.value[0]] = TileStatus.key(_color)
    GLYPHS[_color.value[0].upper()] = TileStatus.door(_color)
ROBOT_GLYPH = "@"
SYMBOLS: Dict[TileStatus, str] = {status: glyph for glyph, status in GLYPHS.items()}


@dataclass(slots=True)
class ParsedMap:
    tiles: Dict[Position, Tile]
    robot: Position
    shape: Tuple[int, int]


def parse_ascii_map(text: str) -> ParsedMap:
    """Parse a level drawn with one glyph per cell.

    Blank leading/trailing lines are ignored; every remaining row must have the
    same width and exactly one ``@`` marks the robot (standing on empty floor).
    """
    rows = [line.rstrip() for line in text.strip("\n").splitlines()]
    rows = [row for row in rows if row]
    if not rows:
        raise ValueError("map is empty")
    width = len(rows[0])
    tiles: Dict[Position, Tile] = {}
    robot: Position | None = None
    for r, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(f"row {r} has width {len(row)}, expected {width}")
        for c, glyph in enumerate(row):
            pos = Position(r, c)
            if glyph == ROBOT_GLYPH:
                if robot is not None:
                    raise ValueError(f"second robot at row {r} col {c}")
                robot = pos
                status = TileStatus.EMPTY
            elif glyph in GLYPHS:
                status = GLYPHS[glyph]
            else:
                raise ValueError(f"unknown glyph {glyph!r} at row {r} col {c}")
            tiles[pos] = Tile(pos, status)
    if robot is None:
        raise ValueError("map has no robot start ('@')")
    return ParsedMap(tiles=tiles, robot=robot, shape=(len(rows), width))


def render_ascii_map(
    tiles: Mapping[Position, Tile],
    robot: Position,
    shape: Tuple[int, int],
) -> str:
    """Inverse of :func:`parse_ascii_map` for the current tile state."""
    lines: List[str] = []
    for r in range(shape[0]):
        cells: List[str] = []
        for c in range(shape[1]):
            pos = Position(r, c)
            if pos == robot:
                cells.append(ROBOT_GLYPH)
            else:
                cells.append(SYMBOLS[tiles[pos].status])
        lines.append("".join(cells))
    return "\n".join(lines)


def tile_codes(tiles: Mapping[Position, Tile], shape: Tuple[int, int]) -> np.ndarray:
    grid = np.zeros(shape, dtype=np.int8)
    for pos, tile in tiles.items():
        grid[pos.row, pos.col] = tile.status.code
    return grid


def passable_mask(codes: np.ndarray) -> np.ndarray:
    """Boolean grid that is False on WALL and WATER cells."""
    blocked = [TileStatus.WALL.code, TileStatus.WATER.code]
    return ~np.isin(codes, blocked)


def distance_field(passable: np.ndarray, source: Position) -> np.ndarray:
    """BFS step counts from ``source`` over ``passable``; -1 where unreachable."""
    rows, cols = passable.shape
    dist = np.full((rows, cols), -1, dtype=np.int32)
    if not passable[source.row, source.col]:
        return dist
    dist[source.row, source.col] = 0
    queue: deque[Tuple[int, int]] = deque([(source.row, source.col)])
    while queue:
        r, c = queue.popleft()
        for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nr, nc = r + dr, c + dc
            if nr < 0 or nr >= rows or nc < 0 or nc >= cols:
                continue
            if not passable[nr, nc] or dist[nr, nc] >= 0:
                continue
            dist[nr, nc] = dist[r, c] + 1
            queue.append((nr, nc))
    return dist
