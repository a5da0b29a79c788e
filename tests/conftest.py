import pytest

from smartroom_rl.agents.q_learner import QLearner
from smartroom_rl.environment.base_env import Action, LearningEnvironment
from smartroom_rl.environment.lab_env import SmartRoomLab
from smartroom_rl.training.experiment_config import TrainingConfig


class ToggleEnv(LearningEnvironment):
    """Two states swapped by a single action; state 1 sits at levels [2, 3]."""

    VECTORS = [[0, 0, 0, 0, 0, 0, 0], [2, 3, 1, 1, 1, 1, 2]]

    def __init__(self, dead_end=False):
        self.current = 0
        self.dead_end = dead_end

    def state_count(self):
        return 2

    def action_count(self):
        return 1

    def read_current_state(self):
        return self.current

    def state_vector(self, state_index):
        return list(self.VECTORS[state_index])

    def get_applicable_actions(self, state_index):
        return [] if self.dead_end else [0]

    def perform_action(self, action_index):
        self.current = 1 - self.current
        return self.current

    def get_compatible_states(self, pattern):
        return [
            i for i, vector in enumerate(self.VECTORS)
            if all(p is None or int(p) == v for p, v in zip(pattern, vector))
        ]

    def get_action(self, action_index):
        if action_index == 0:
            return Action(0, "http://example.org/was#Toggle", ["Toggle"], [1])
        return None


@pytest.fixture
def lab():
    return SmartRoomLab(sunshine_drift=0.0, seed=0)


@pytest.fixture
def learner(lab):
    return QLearner(lab, seed=0)


@pytest.fixture
def toggle_env():
    return ToggleEnv()


def no_early_stop(**overrides):
    return TrainingConfig(early_stop_streak=10 ** 6, **overrides)
