"""Tick loop that feeds robot actions into the environment."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List

from chipbot.env import GridEnv
from chipbot.policy import Robot
from chipbot.types import Action, KeyColor

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class EpisodeResult:
    solved: bool
    steps: int
    actions: List[Action] = field(default_factory=list)
    collected_keys: FrozenSet[KeyColor] = frozenset()
    stalled: bool = False


class EpisodeRunner:
    def __init__(self, env: GridEnv, robot: Robot, stall_limit: int = 8, render: bool = False):
        self.env = env
        self.robot = robot
        self.stall_limit = stall_limit
        self.render = render

    def run(self) -> EpisodeResult:
        actions: List[Action] = []
        idle = 0
        stalled = False
        while not self.env.done:
            before = (self.env.get_robot_position(), self.robot.state)
            action = self.robot.get_action()
            self.env.step(action)
            actions.append(action)
            if self.render:
                LOGGER.info("step %s %s\n%s", self.env.step_idx, action.name, self.env.render())
            after = (self.env.get_robot_position(), self.robot.state)
            # A tick that neither moves the robot nor collects anything.
            idle = idle + 1 if before == after else 0
            if self.stall_limit and idle >= self.stall_limit:
                stalled = True
                LOGGER.warning(
                    "Robot idle for %s ticks at %s (target=%s)",
                    idle,
                    self.env.get_robot_position(),
                    self.robot.last_target,
                )
                break
        return EpisodeResult(
            solved=self.env.solved,
            steps=self.env.step_idx,
            actions=actions,
            collected_keys=self.robot.collected_keys,
            stalled=stalled,
        )
