from pathlib import Path

import pytest

from chipbot.env import GridEnv
from chipbot.objectives import GoalLookupError, Target, select_target
from chipbot.policy import NavPlanner, Robot
from chipbot.types import Action, KeyColor, Position

MAPS = Path(__file__).resolve().parent.parent / "maps"

OPEN_5X5 = "\n".join(
    [
        "@...r",
        ".....",
        ".....",
        ".....",
        "c...X",
    ]
)


def test_open_grid_collects_key_before_chip():
    env = GridEnv.from_text(OPEN_5X5)
    robot = Robot(env)
    for _ in range(4):
        action = robot.get_action()
        assert action is Action.MOVE_RIGHT
        env.step(action)
    assert env.get_robot_position() == Position(0, 4)

    assert robot.get_action() is Action.DO_NOTHING
    assert robot.collected_keys == frozenset({KeyColor.RED})
    assert robot.state.keys_remaining == 0
    assert robot.state.chips == (Position(4, 0),)
    assert select_target(robot.state, env.get_robot_position()) == Target("CHIP", Position(4, 0))


def test_collection_tick_removes_exactly_one_chip():
    env = GridEnv.from_text("@c.c\n...X")
    robot = Robot(env)
    env.step(robot.get_action())
    assert env.get_robot_position() == Position(0, 1)
    before = robot.state
    assert robot.get_action() is Action.DO_NOTHING
    assert env.get_robot_position() == Position(0, 1)
    assert len(robot.state.chips) == len(before.chips) - 1
    assert robot.state.collected_keys == before.collected_keys
    assert robot.last_target == Target("CHIP", Position(0, 1))


def test_wall_between_robot_and_items_means_idle():
    env = GridEnv.from_file(MAPS / "walled.txt")
    robot = Robot(env)
    for _ in range(5):
        assert robot.get_action() is Action.DO_NOTHING
        env.step(Action.DO_NOTHING)
    assert robot.last_target.kind == "CHIP"
    goal = Position(5, 5)
    assert NavPlanner().next_step(env, env.get_robot_position(), goal) is Action.DO_NOTHING


def test_robot_waits_for_door_key():
    env = GridEnv.from_text("@.b\n##B\n..X")
    robot = Robot(env)
    # Blue key first; the door stays closed for planning until it is collected.
    assert robot.get_action() is Action.MOVE_RIGHT
    env.step(Action.MOVE_RIGHT)
    env.step(robot.get_action())
    assert env.get_robot_position() == Position(0, 2)
    assert robot.get_action() is Action.DO_NOTHING
    assert robot.get_action() is Action.MOVE_DOWN


def test_standing_on_goal_is_terminal_noop():
    env = GridEnv.from_text("@X")
    robot = Robot(env)
    env.step(robot.get_action())
    assert env.solved
    for _ in range(3):
        assert robot.get_action() is Action.DO_NOTHING
    assert robot.last_target.kind == "GOAL"


def test_missing_goal_propagates():
    env = GridEnv.from_text("@c.")
    robot = Robot(env)
    env.step(robot.get_action())
    assert robot.get_action() is Action.DO_NOTHING
    with pytest.raises(GoalLookupError):
        robot.get_action()
