"""Target selection over the robot's collectible working sets.

Collection proceeds in strict phases: every key, then every chip, then the
goal. The phase is derived from the working sets on each call rather than
stored, and collecting an item is an explicit state transition so both halves
can be exercised without an environment.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from chipbot.types import KeyColor, Position, TargetKind, TileStatus


class GoalLookupError(LookupError):
    """The world does not expose exactly one goal cell."""


def heuristic(a: Position, b: Position) -> int:
    """Manhattan distance on a 4-connected grid."""
    return abs(a.row - b.row) + abs(a.col - b.col)


@dataclass(frozen=True, slots=True)
class Target:
    kind: TargetKind
    position: Position
    color: Optional[KeyColor] = None


@dataclass(frozen=True, slots=True)
class AgentState:
    """Collectibles the robot still intends to pick up, plus keys it holds."""

    keys: Mapping[KeyColor, Tuple[Position, ...]] = field(default_factory=dict)
    chips: Tuple[Position, ...] = ()
    goals: Tuple[Position, ...] = ()
    collected_keys: FrozenSet[KeyColor] = frozenset()

    @classmethod
    def from_positions(cls, positions: Mapping[TileStatus, Sequence[Position]]) -> "AgentState":
        """Copy the environment's collectible positions into a fresh state."""
        keys: Dict[KeyColor, Tuple[Position, ...]] = {}
        for status, found in positions.items():
            color = status.key_color
            if color is not None and found:
                keys[color] = tuple(found)
        return cls(
            keys=keys,
            chips=tuple(positions.get(TileStatus.CHIP, ())),
            goals=tuple(positions.get(TileStatus.GOAL, ())),
        )

    @property
    def keys_remaining(self) -> int:
        return sum(len(found) for found in self.keys.values())


def current_phase(state: AgentState) -> TargetKind:
    if state.keys_remaining:
        return "KEY"
    if state.chips:
        return "CHIP"
    return "GOAL"


def nearest(origin: Position, candidates: Iterable[Position]) -> Optional[Position]:
    """Closest candidate by Manhattan distance; the first one wins ties."""
    best: Optional[Position] = None
    best_dist = 0
    for pos in candidates:
        dist = heuristic(origin, pos)
        if best is None or dist < best_dist:
            best, best_dist = pos, dist
    return best


def select_target(state: AgentState, robot: Position) -> Target:
    phase = current_phase(state)
    if phase == "KEY":
        best: Optional[Target] = None
        best_dist = 0
        for color, found in state.keys.items():
            pos = nearest(robot, found)
            if pos is None:
                continue
            dist = heuristic(robot, pos)
            if best is None or dist < best_dist:
                best, best_dist = Target("KEY", pos, color), dist
        return best
    if phase == "CHIP":
        pos = nearest(robot, state.chips)
        return Target("CHIP", pos)
    if len(state.goals) != 1:
        raise GoalLookupError(f"expected exactly one goal cell, found {len(state.goals)}")
    return Target("GOAL", state.goals[0])


def apply_collection(state: AgentState, target: Target) -> AgentState:
    """Return the state after picking up ``target``.

    Removal is keyed by position, so applying the same target twice is a no-op
    the second time. Goals are never consumed.
    """
    if target.kind == "KEY":
        if target.color is None:
            raise ValueError("key targets require a color")
        remaining = tuple(p for p in state.keys.get(target.color, ()) if p != target.position)
        keys = dict(state.keys)
        if remaining:
            keys[target.color] = remaining
        else:
            keys.pop(target.color, None)
        return replace(
            state,
            keys=keys,
            collected_keys=state.collected_keys | {target.color},
        )
    if target.kind == "CHIP":
        return replace(state, chips=tuple(p for p in state.chips if p != target.position))
    return state


__all__ = [
    "GoalLookupError",
    "heuristic",
    "Target",
    "AgentState",
    "current_phase",
    "nearest",
    "select_target",
    "apply_collection",
]
