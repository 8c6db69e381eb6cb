import pytest

from chipbot.objectives import (
    AgentState,
    GoalLookupError,
    Target,
    apply_collection,
    current_phase,
    heuristic,
    select_target,
)
from chipbot.types import KeyColor, Position, TileStatus


def _state() -> AgentState:
    positions = {
        TileStatus.KEY_RED: [Position(0, 9)],
        TileStatus.KEY_BLUE: [Position(5, 5), Position(2, 1)],
        TileStatus.CHIP: [Position(0, 1), Position(7, 7)],
        TileStatus.GOAL: [Position(9, 9)],
        TileStatus.WALL: [Position(4, 4)],
    }
    return AgentState.from_positions(positions)


def test_heuristic_is_manhattan():
    assert heuristic(Position(1, 2), Position(4, 0)) == 5
    assert heuristic(Position(3, 3), Position(3, 3)) == 0


def test_keys_take_priority_over_adjacent_chip():
    state = _state()
    target = select_target(state, Position(0, 0))
    assert current_phase(state) == "KEY"
    assert target.kind == "KEY"
    assert target == Target("KEY", Position(2, 1), KeyColor.BLUE)


def test_nearest_key_across_colors():
    target = select_target(_state(), Position(0, 8))
    assert target == Target("KEY", Position(0, 9), KeyColor.RED)


def test_selection_is_idempotent():
    state = _state()
    robot = Position(3, 3)
    assert select_target(state, robot) == select_target(state, robot)


def test_distance_tie_goes_to_first_found():
    state = AgentState.from_positions(
        {
            TileStatus.CHIP: [Position(0, 2), Position(2, 0)],
            TileStatus.GOAL: [Position(5, 5)],
        }
    )
    assert select_target(state, Position(0, 0)).position == Position(0, 2)


def test_chips_then_goal():
    state = AgentState.from_positions(
        {
            TileStatus.CHIP: [Position(0, 1), Position(7, 7)],
            TileStatus.GOAL: [Position(9, 9)],
        }
    )
    assert current_phase(state) == "CHIP"
    first = select_target(state, Position(6, 6))
    assert first == Target("CHIP", Position(7, 7))
    state = apply_collection(state, first)
    state = apply_collection(state, select_target(state, Position(7, 7)))
    assert current_phase(state) == "GOAL"
    assert select_target(state, Position(0, 1)) == Target("GOAL", Position(9, 9))


def test_key_collection_removes_one_position_and_adds_color():
    state = _state()
    target = Target("KEY", Position(2, 1), KeyColor.BLUE)
    after = apply_collection(state, target)
    assert after.keys[KeyColor.BLUE] == (Position(5, 5),)
    assert after.collected_keys == frozenset({KeyColor.BLUE})
    assert after.keys_remaining == state.keys_remaining - 1
    assert after.chips == state.chips
    # Original state is untouched.
    assert state.collected_keys == frozenset()


def test_collection_is_idempotent():
    state = _state()
    target = Target("KEY", Position(0, 9), KeyColor.RED)
    once = apply_collection(state, target)
    twice = apply_collection(once, target)
    assert once == twice
    assert KeyColor.RED not in once.keys


def test_chip_collection_leaves_keys_alone():
    state = _state()
    after = apply_collection(state, Target("CHIP", Position(0, 1)))
    assert after.chips == (Position(7, 7),)
    assert after.keys == state.keys
    assert after.collected_keys == frozenset()


def test_goal_is_never_consumed():
    state = AgentState.from_positions({TileStatus.GOAL: [Position(1, 1)]})
    assert apply_collection(state, Target("GOAL", Position(1, 1))) is state


def test_missing_goal_is_fatal():
    state = AgentState.from_positions({TileStatus.CHIP: []})
    with pytest.raises(GoalLookupError):
        select_target(state, Position(0, 0))


def test_multiple_goals_are_fatal():
    state = AgentState.from_positions({TileStatus.GOAL: [Position(0, 1), Position(1, 0)]})
    with pytest.raises(LookupError):
        select_target(state, Position(0, 0))


def test_state_copies_environment_positions():
    chips = [Position(1, 1)]
    state = AgentState.from_positions({TileStatus.CHIP: chips, TileStatus.GOAL: [Position(2, 2)]})
    chips.append(Position(3, 3))
    assert state.chips == (Position(1, 1),)
