"""Per-tick decision agent: keys first, then chips, then the goal."""

from __future__ import annotations

import logging
from typing import FrozenSet, Optional

from chipbot.objectives import AgentState, Target, apply_collection, select_target
from chipbot.types import Action, KeyColor

from .nav_planner import NavPlanner

LOGGER = logging.getLogger(__name__)


class Robot:
    """Chooses one action per call by re-planning towards the current target.

    Reaching a key or chip costs a tick of its own: the robot records the pickup
    and stands still, it never moves and collects in the same call.
    """

    def __init__(self, env, planner: NavPlanner | None = None):
        self.env = env
        self.planner = planner or NavPlanner()
        self._state = AgentState.from_positions(env.get_environment_positions())
        self._last_target: Optional[Target] = None

    @property
    def state(self) -> AgentState:
        return self._state

    @property
    def collected_keys(self) -> FrozenSet[KeyColor]:
        return self._state.collected_keys

    @property
    def last_target(self) -> Optional[Target]:
        return self._last_target

    def get_action(self) -> Action:
        robot = self.env.get_robot_position()
        target = select_target(self._state, robot)
        self._last_target = target
        if robot == target.position:
            if target.kind != "GOAL":
                self._state = apply_collection(self._state, target)
                LOGGER.info(
                    "Collected %s at (%s, %s)",
                    target.color.value + " key" if target.color else "chip",
                    robot.row,
                    robot.col,
                )
            return Action.DO_NOTHING
        action = self.planner.next_step(
            self.env, robot, target.position, self._state.collected_keys
        )
        LOGGER.debug("target=%s %s action=%s", target.kind, target.position, action.name)
        return action
