"""Core data contracts shared across the agent stack."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Literal, Optional, Tuple

TargetKind = Literal["KEY", "CHIP", "GOAL"]


@dataclass(frozen=True, slots=True)
class Position:
    """Grid coordinate (row grows downward, col grows rightward)."""

    row: int
    col: int

    def offset(self, drow: int, dcol: int) -> "Position":
        return Position(self.row + drow, self.col + dcol)


class KeyColor(Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"


class TileStatus(Enum):
    EMPTY = "empty"
    WALL = "wall"
    WATER = "water"
    GOAL = "goal"
    CHIP = "chip"
    KEY_RED = "key_red"
    KEY_BLUE = "key_blue"
    KEY_GREEN = "key_green"
    KEY_YELLOW = "key_yellow"
    DOOR_RED = "door_red"
    DOOR_BLUE = "door_blue"
    DOOR_GREEN = "door_green"
    DOOR_YELLOW = "door_yellow"

    @property
    def is_key(self) -> bool:
        return self.value.startswith("key_")

    @property
    def is_door(self) -> bool:
        return self.value.startswith("door_")

    @property
    def key_color(self) -> Optional[KeyColor]:
        if not self.is_key:
            return None
        return KeyColor(self.value.split("_", 1)[1])

    @property
    def door_color(self) -> Optional[KeyColor]:
        if not self.is_door:
            return None
        return KeyColor(self.value.split("_", 1)[1])

    @property
    def blocks_movement(self) -> bool:
        """Terrain that never becomes traversable."""
        return self in (TileStatus.WALL, TileStatus.WATER)

    @classmethod
    def key(cls, color: KeyColor) -> "TileStatus":
        return cls(f"key_{color.value}")

    @classmethod
    def door(cls, color: KeyColor) -> "TileStatus":
        return cls(f"door_{color.value}")

    @property
    def code(self) -> int:
        """Stable small integer used in numpy observations."""
        return _TILE_CODES[self]


_TILE_CODES = {status: idx for idx, status in enumerate(TileStatus)}


@dataclass(slots=True)
class Tile:
    position: Position
    status: TileStatus


class Action(Enum):
    MOVE_UP = "up"
    MOVE_DOWN = "down"
    MOVE_LEFT = "left"
    MOVE_RIGHT = "right"
    DO_NOTHING = "none"

    @property
    def delta(self) -> Tuple[int, int]:
        return _ACTION_DELTAS[self]


_ACTION_DELTAS = {
    Action.MOVE_UP: (-1, 0),
    Action.MOVE_DOWN: (1, 0),
    Action.MOVE_LEFT: (0, -1),
    Action.MOVE_RIGHT: (0, 1),
    Action.DO_NOTHING: (0, 0),
}

# Neighbor labels as reported by the environment, mapped to the move reaching them.
NEIGHBOR_ACTIONS = {
    "above": Action.MOVE_UP,
    "below": Action.MOVE_DOWN,
    "left": Action.MOVE_LEFT,
    "right": Action.MOVE_RIGHT,
}


@dataclass(slots=True)
class Observation:
    """Snapshot of the grid handed to logging/renderers."""

    tiles: "np.ndarray"  # (rows, cols), int8 tile codes
    robot: Position
    step_idx: int
    held_keys: FrozenSet[KeyColor] = field(default_factory=frozenset)


__all__ = [
    "TargetKind",
    "Position",
    "KeyColor",
    "TileStatus",
    "Tile",
    "Action",
    "NEIGHBOR_ACTIONS",
    "Observation",
]
