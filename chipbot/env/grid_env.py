"""In-memory grid environment the robot queries and acts in."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Set

from chipbot.types import Action, KeyColor, Observation, Position, Tile, TileStatus
from chipbot.utils.maps import parse_ascii_map, render_ascii_map, tile_codes

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class EnvConfig:
    max_steps: int = 500


class GridEnv:
    """Ground truth for terrain, pickups and door state.

    The robot keeps its own copy of collectible positions; this class tracks
    what is actually still on the floor.
    """

    def __init__(self, tiles: Dict[Position, Tile], robot: Position, shape, config: EnvConfig | None = None):
        self.config = config or EnvConfig()
        self.shape = tuple(shape)
        self._tiles = tiles
        self._robot = robot
        self._held_keys: Set[KeyColor] = set()
        self.step_idx = 0
        self.solved = False

    @classmethod
    def from_text(cls, text: str, config: EnvConfig | None = None) -> "GridEnv":
        parsed = parse_ascii_map(text)
        return cls(parsed.tiles, parsed.robot, parsed.shape, config)

    @classmethod
    def from_file(cls, path: Path | str, config: EnvConfig | None = None) -> "GridEnv":
        with Path(path).open("r", encoding="utf-8") as handle:
            return cls.from_text(handle.read(), config)

    # --------------------------------------------------------------------- API
    def get_tiles(self) -> Dict[Position, Tile]:
        return self._tiles

    def get_environment_positions(self) -> Dict[TileStatus, List[Position]]:
        """Positions of every non-empty tile grouped by status."""
        positions: Dict[TileStatus, List[Position]] = {}
        for pos, tile in self._tiles.items():
            if tile.status is TileStatus.EMPTY:
                continue
            positions.setdefault(tile.status, []).append(pos)
        return positions

    def get_robot_position(self) -> Position:
        return self._robot

    def get_neighbor_positions(self, pos: Position) -> Dict[str, Position]:
        candidates = {
            "above": pos.offset(-1, 0),
            "below": pos.offset(1, 0),
            "left": pos.offset(0, -1),
            "right": pos.offset(0, 1),
        }
        return {label: p for label, p in candidates.items() if p in self._tiles}

    @property
    def held_keys(self) -> frozenset[KeyColor]:
        return frozenset(self._held_keys)

    @property
    def chips_remaining(self) -> int:
        return sum(1 for tile in self._tiles.values() if tile.status is TileStatus.CHIP)

    @property
    def done(self) -> bool:
        return self.solved or self.step_idx >= self.config.max_steps

    def observe(self) -> Observation:
        return Observation(
            tiles=tile_codes(self._tiles, self.shape),
            robot=self._robot,
            step_idx=self.step_idx,
            held_keys=self.held_keys,
        )

    def render(self) -> str:
        return render_ascii_map(self._tiles, self._robot, self.shape)

    def step(self, action: Action) -> Observation:
        if not isinstance(action, Action):
            raise ValueError(f"Unsupported action {action!r}")
        self.step_idx += 1
        if action is not Action.DO_NOTHING:
            dest = self._robot.offset(*action.delta)
            if self._can_enter(dest):
                self._robot = dest
                self._on_enter(dest)
        return self.observe()

    # ----------------------------------------------------------------- helpers
    def _can_enter(self, dest: Position) -> bool:
        tile = self._tiles.get(dest)
        if tile is None or tile.status.blocks_movement:
            return False
        if tile.status.is_door:
            return tile.status.door_color in self._held_keys
        return True

    def _on_enter(self, pos: Position) -> None:
        tile = self._tiles[pos]
        status = tile.status
        if status.is_door:
            tile.status = TileStatus.EMPTY
            LOGGER.info("Unlocked %s door at (%s, %s)", status.door_color.value, pos.row, pos.col)
        elif status.is_key:
            tile.status = TileStatus.EMPTY
            self._held_keys.add(status.key_color)
        elif status is TileStatus.CHIP:
            tile.status = TileStatus.EMPTY
        elif status is TileStatus.GOAL and self.chips_remaining == 0:
            self.solved = True
            LOGGER.info("Goal reached after %s steps", self.step_idx)
