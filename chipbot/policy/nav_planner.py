"""A* navigation planner over the environment's tile map."""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Callable, Dict, List, Mapping, Optional

from chipbot.objectives import heuristic
from chipbot.types import NEIGHBOR_ACTIONS, Action, KeyColor, Position, Tile

LOGGER = logging.getLogger(__name__)

NeighborFn = Callable[[Position], Mapping[str, Position]]


@dataclass(slots=True)
class NavPlannerConfig:
    """Configuration for grid navigation."""

    max_expansions: Optional[int] = None  # Optional cap on A* expansions.
    block_locked_doors: bool = True  # Doors stay closed until their key is held.


@dataclass(order=True, slots=True)
class _Node:
    priority: int
    seq: int
    position: Position = field(compare=False)


class NavPlanner:
    """Shortest paths with unit step cost and a Manhattan heuristic.

    Only the first step of a path is ever acted on; callers re-plan every tick
    so removed items and unlocked doors are picked up immediately.
    """

    def __init__(self, config: NavPlannerConfig | None = None):
        self.config = config or NavPlannerConfig()
        self.last_expansions = 0

    def plan(
        self,
        tiles: Mapping[Position, Tile],
        neighbors: NeighborFn,
        start: Position,
        goal: Position,
        held_keys: AbstractSet[KeyColor] = frozenset(),
    ) -> List[Position]:
        """Return the path ``start..goal`` inclusive, or ``[]`` if unreachable."""
        if start == goal:
            return [start]
        if start not in tiles or goal not in tiles:
            return []

        counter = itertools.count()
        frontier: List[_Node] = [_Node(0, next(counter), start)]
        came_from: Dict[Position, Optional[Position]] = {start: None}
        cost_so_far: Dict[Position, int] = {start: 0}
        expansions = 0

        while frontier:
            current = heapq.heappop(frontier).position
            if current == goal:
                self.last_expansions = expansions
                return self._reconstruct_path(came_from, goal)
            expansions += 1
            if self.config.max_expansions and expansions > self.config.max_expansions:
                LOGGER.debug("A* gave up after %s expansions towards %s", expansions, goal)
                break
            for neighbor in neighbors(current).values():
                tile = tiles.get(neighbor)
                if tile is None or not self._passable(tile, held_keys):
                    continue
                new_cost = cost_so_far[current] + 1
                if neighbor not in cost_so_far or new_cost < cost_so_far[neighbor]:
                    cost_so_far[neighbor] = new_cost
                    came_from[neighbor] = current
                    priority = new_cost + heuristic(goal, neighbor)
                    heapq.heappush(frontier, _Node(priority, next(counter), neighbor))
        self.last_expansions = expansions
        return []

    def next_step(
        self,
        env,
        start: Position,
        goal: Position,
        held_keys: AbstractSet[KeyColor] = frozenset(),
    ) -> Action:
        """First move along the shortest path, or DO_NOTHING when there is none."""
        path = self.plan(env.get_tiles(), env.get_neighbor_positions, start, goal, held_keys)
        if len(path) < 2:
            if not path:
                LOGGER.debug("No path from %s to %s", start, goal)
            return Action.DO_NOTHING
        step = path[1]
        for label, pos in env.get_neighbor_positions(start).items():
            if pos == step and label in NEIGHBOR_ACTIONS:
                return NEIGHBOR_ACTIONS[label]
        return Action.DO_NOTHING

    # ------------------------------------------------------------------ helpers
    def _passable(self, tile: Tile, held_keys: AbstractSet[KeyColor]) -> bool:
        status = tile.status
        if status.blocks_movement:
            return False
        if self.config.block_locked_doors and status.is_door:
            return status.door_color in held_keys
        return True

    @staticmethod
    def _reconstruct_path(came_from: Dict[Position, Optional[Position]], goal: Position) -> List[Position]:
        path: List[Position] = [goal]
        cur = came_from[goal]
        while cur is not None:
            path.append(cur)
            cur = came_from[cur]
        path.reverse()
        return path
