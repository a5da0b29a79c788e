import numpy as np
import pytest

from smartroom_rl.agents.policy import FALLBACK_ACTION_TAG
from smartroom_rl.agents.q_learner import QLearner
from smartroom_rl.exceptions import ConfigurationError
from smartroom_rl.training.experiment_config import create_default_config


def action_index(lab, response):
    for index in range(lab.action_count()):
        action = lab.get_action(index)
        if (action.tag, action.payload_tags, action.payload) == tuple(response):
            return index
    raise AssertionError(f"Unknown action: {response}")


def test_end_to_end_goal_2_3(learner, lab):
    report = learner.calculate_q([2, 3], 500, 0.1, 0.9, 0.2, 100)
    assert report.published

    status = learner.get_q_table_status([2, 3])
    assert "status=READY" in status
    table = learner.get_q_table([2, 3])
    assert table.max() > 0
    assert (table > 0).sum() >= 1

    # Two steps from the goal: Z1 light on, then Z2 blinds up
    description = [0, 2, 0, 1, 0, 0, 2]
    response = learner.get_action_from_state([2, 3], description)
    state = lab.get_compatible_states(description)[0]
    assert action_index(lab, response) in lab.get_applicable_actions(state)


def test_parameters_may_arrive_as_strings(learner):
    report = learner.calculate_q(["1", "1"], "20", "0.1", "0.9", "0.2", "100")
    assert report.episodes_run <= 20
    assert learner.get_q_table((1, 1)) is not None


@pytest.mark.parametrize("args", [
    ([2, 3], "many", 0.1, 0.9, 0.2, 100),
    ([2, 3], 10, "fast", 0.9, 0.2, 100),
    ([2, 3], 10, 0.1, 0.9, 0.2, "lots"),
    ([2, 3], 10, 1.5, 0.9, 0.2, 100),
    ([2, 3], 10, 0.1, -0.1, 0.2, 100),
    ([2, 3], 10, 0.1, 0.9, 2, 100),
    ([2, 3], -1, 0.1, 0.9, 0.2, 100),
    ([2, 3], 10.5, 0.1, 0.9, 0.2, 100),
    (["a", 3], 10, 0.1, 0.9, 0.2, 100),
    ({"z1": 2, "z2": 3}, 10, 0.1, 0.9, 0.2, 100),
    ({2, 3}, 10, 0.1, 0.9, 0.2, 100),
    ([2, 3], 10, 0.1, 0.9, 0.2, "nan"),
    ([2, 3], 10, 0.1, 0.9, 0.2, float("inf")),
])
def test_configuration_errors_fail_fast(learner, args):
    with pytest.raises(ConfigurationError):
        learner.calculate_q(*args)
    assert len(learner.q_tables) == 0


def test_unknown_goal_falls_back(learner):
    response = learner.get_action_from_state([1, 2], [2, 2, 1, 0, 1, 1, 2])
    assert tuple(response) == (FALLBACK_ACTION_TAG, ["Z1Light"], [True])


@pytest.mark.parametrize("goal", [{"z1": 2, "z2": 3}, {2, 3}])
def test_goal_that_is_not_a_sequence_falls_back(learner, goal):
    learner.calculate_q([2, 3], 20, 0.1, 0.9, 0.2, 100)
    response = learner.get_action_from_state(goal, [0, 2, 0, 1, 0, 0, 2])
    assert tuple(response) == (FALLBACK_ACTION_TAG, ["Z1Light"], [True])
    assert learner.get_q_table_status(goal).startswith("Invalid goal description")


def test_training_one_goal_leaves_other_tables_untouched(learner):
    learner.calculate_q([3, 3], 100, 0.1, 0.9, 0.2, 100)
    table_3_3 = learner.get_q_table([3, 3])
    snapshot = table_3_3.copy()

    # The illuminance memory is reset per run, so the second run cannot
    # inherit the first run's last levels either.
    learner.calculate_q([0, 0], 100, 0.1, 0.9, 0.2, 100)

    assert learner.get_q_table([3, 3]) is table_3_3
    np.testing.assert_array_equal(table_3_3, snapshot)
    assert learner.get_q_table([0, 0]) is not table_3_3


def test_retraining_replaces_table(learner):
    learner.calculate_q([2, 3], 20, 0.1, 0.9, 0.2, 100)
    first = learner.get_q_table([2, 3])
    learner.calculate_q((2, "3"), 20, 0.1, 0.9, 0.2, 100)
    assert learner.get_q_table([2, 3]) is not first
    assert len(learner.q_tables) == 1


def test_status_without_table(learner):
    assert learner.get_q_table_status([2, 3]) == "No Q-table trained for goal [2, 3]"
    assert learner.get_q_table_status("bad").startswith("Invalid goal description")


def test_zero_episode_run_is_untrained(learner):
    learner.calculate_q([2, 3], 0, 0.1, 0.9, 0.2, 100)
    assert "status=UNTRAINED" in learner.get_q_table_status([2, 3])


def test_from_config_builds_lab():
    config = create_default_config("test")
    config.environment.sunshine_drift = 0.0
    learner = QLearner.from_config(config)
    assert learner.env.state_count() == 1024
    assert learner.trainer.config is config.training


def test_print_q_table(learner, capsys):
    learner.print_q_table([2, 3])
    assert "No Q-table" in capsys.readouterr().out
    learner.calculate_q([2, 3], 5, 0.1, 0.9, 0.2, 100)
    learner.print_q_table([2, 3], max_states=2)
    out = capsys.readouterr().out
    assert out.startswith("Q matrix")
    assert "more states not shown" in out
