import numpy as np
import pytest

from smartroom_rl.agents.descriptions import GoalDescription, StateDescription
from smartroom_rl.exceptions import ConfigurationError


def test_equal_goals_share_a_key_across_value_kinds():
    keys = {
        GoalDescription.from_raw([2, 3]).key,
        GoalDescription.from_raw(("2", "3")).key,
        GoalDescription.from_raw([2.0, " 3 "]).key,
        GoalDescription(2, 3).key,
    }
    assert keys == {(2, 3)}


def test_distinct_goals_have_distinct_keys():
    keys = {GoalDescription(a, b).key for a in range(4) for b in range(4)}
    assert len(keys) == 16


@pytest.mark.parametrize("raw", [
    [2], [1, 2, 3], "23", [True, 1], [1.5, 2], ["x", 2], [-1, 0], None,
    {"z1": 2, "z2": 3}, {2, 3},
])
def test_invalid_goals_are_rejected(raw):
    with pytest.raises(ConfigurationError):
        GoalDescription.from_raw(raw)


def test_goal_pattern_and_reached():
    goal = GoalDescription(2, 3)
    assert goal.as_pattern() == [2, 3, None, None, None, None, None]
    assert goal.is_reached([2, 3, 0, 0, 0, 0, 1])
    assert not goal.is_reached([2, 2, 0, 0, 0, 0, 1])


def test_state_description_encodes_booleans():
    description = StateDescription.from_raw([2, 2, True, False, "true", "false", "2"])
    assert description.fields == (2, 2, 1, 0, 1, 0, 2)
    assert description.is_complete


def test_partial_state_description():
    description = StateDescription.from_raw([2, 2, None])
    assert not description.is_complete
    assert description.as_pattern() == [2, 2, None]


def test_goal_from_numpy_array():
    assert GoalDescription.from_raw(np.array([2, 3])).key == (2, 3)


@pytest.mark.parametrize("raw", [{"z1": 2}, {1, 2, 3}, "2201112"])
def test_state_description_must_be_a_sequence(raw):
    with pytest.raises(ConfigurationError):
        StateDescription.from_raw(raw)
