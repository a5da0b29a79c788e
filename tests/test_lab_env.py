import pytest

from smartroom_rl.environment.lab_env import SmartRoomLab


def test_state_and_action_space_sizes(lab):
    assert lab.state_count() == 4 * 4 * 2 * 2 * 2 * 2 * 4
    assert lab.action_count() == 8
    assert lab.observation_space.n == lab.state_count()
    assert lab.action_space.n == lab.action_count()


def test_initial_state_is_dark(lab):
    assert lab.current_state_vector() == [0, 0, 0, 0, 0, 0, 2]


def test_only_state_changing_actions_are_applicable(lab):
    state, _ = lab.reset(options={"state_vector": [2, 0, 1, 0, 0, 0, 2]})
    # Z1 light is already on, so SetZ1Light(true) is not applicable
    assert lab.get_applicable_actions(state) == [1, 2, 4, 6]


def test_perform_action_settles_levels(lab):
    lab.reset(options={"state_vector": [0, 2, 0, 1, 0, 0, 2]})
    state = lab.perform_action(6)  # Z2 blinds up
    assert lab.state_vector(state) == [0, 3, 0, 1, 0, 1, 2]
    state = lab.perform_action(2)  # Z1 blinds up
    assert lab.state_vector(state) == [2, 3, 0, 1, 1, 1, 2]


def test_compatible_states_with_partial_pattern(lab):
    matches = lab.get_compatible_states([2, 3, None, None, None, None, None])
    assert len(matches) == 2 * 2 * 2 * 2 * 4
    assert all(lab.state_vector(i)[:2] == [2, 3] for i in matches)


def test_compatible_states_accepts_booleans(lab):
    matches = lab.get_compatible_states([2, 2, True, False, True, True, 2])
    assert len(matches) == 1
    assert lab.state_vector(matches[0]) == [2, 2, 1, 0, 1, 1, 2]


def test_get_action_descriptor(lab):
    action = lab.get_action(0)
    assert action.tag == "http://example.org/was#SetZ1Light"
    assert action.payload_tags == ["Z1Light"]
    assert action.payload == [True]
    assert lab.get_action(99) is None


def test_reset_rejects_unknown_vector(lab):
    with pytest.raises(ValueError):
        lab.reset(options={"state_vector": [9, 0, 0, 0, 0, 0, 0]})


def test_gym_step_reports_state_vector(lab):
    lab.reset(options={"state_vector": [0, 0, 0, 0, 0, 0, 2]})
    state, reward, terminated, truncated, info = lab.step(4)
    assert info["state_vector"] == [0, 2, 0, 1, 0, 0, 2]
    assert info["action_tag"].endswith("SetZ2Light")
    assert reward == 0.0 and not terminated and not truncated


def test_random_reset_is_settled():
    lab = SmartRoomLab(seed=3)
    for _ in range(20):
        state, _ = lab.reset()
        z1, z2, l1, l2, b1, b2, sun = lab.state_vector(state)
        assert z1 == min(3, 2 * l1 + b1 * min(sun, 2))
        assert z2 == min(3, 2 * l2 + b2 * min(sun, 2))
