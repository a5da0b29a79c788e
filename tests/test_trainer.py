import logging
import threading

import numpy as np
import pytest

from smartroom_rl.agents.descriptions import GoalDescription
from smartroom_rl.agents.q_table import QTableStore, create_q_table
from smartroom_rl.environment.lab_env import SmartRoomLab
from smartroom_rl.training import q_trainer
from smartroom_rl.training.experiment_config import TrainingConfig
from smartroom_rl.training.q_trainer import QTrainer
from tests.conftest import ToggleEnv, no_early_stop


class CountingEvent(threading.Event):
    """Reports itself set after a fixed number of checks."""

    def __init__(self, allowed_checks):
        super().__init__()
        self.allowed_checks = allowed_checks
        self.checks = 0

    def is_set(self):
        self.checks += 1
        return self.checks > self.allowed_checks


def test_epsilon_zero_is_greedy(lab):
    trainer = QTrainer(lab, QTableStore(), seed=0)
    table = create_q_table(lab.state_count(), lab.action_count())
    table[0, 4] = 1.0
    assert all(trainer.select_action(table, 0, [0, 2, 4, 6], 0.0) == 4 for _ in range(20))


def test_epsilon_one_explores_applicable_actions_only(lab):
    trainer = QTrainer(lab, QTableStore(), seed=0)
    table = create_q_table(lab.state_count(), lab.action_count())
    picks = {trainer.select_action(table, 0, [0, 2, 4, 6], 1.0) for _ in range(200)}
    assert picks == {0, 2, 4, 6}


def test_random_walk_length_within_bounds():
    env = ToggleEnv()
    trainer = QTrainer(env, QTableStore(), TrainingConfig(min_random_actions=2,
                                                          max_random_actions=2), seed=0)
    trainer.random_walk()
    # Two toggles bring the environment back to where it started
    assert env.read_current_state() == 0


def test_train_publishes_table_and_report(lab):
    store = QTableStore()
    report = QTrainer(lab, store, no_early_stop(), seed=0).train(GoalDescription(2, 3), episodes=50)
    assert report.published
    assert report.episodes_run == 50
    assert 0 <= report.successes <= 50
    assert len(report.episodes) == 50
    table = store.get((2, 3))
    assert table.shape == (lab.state_count(), lab.action_count())
    assert report.max_q == pytest.approx(table.max())


def test_completion_logs_table_sample(toggle_env, caplog):
    with caplog.at_level(logging.INFO, logger="smartroom_rl.training.q_trainer"):
        QTrainer(toggle_env, QTableStore(), seed=0).train(GoalDescription(2, 3), episodes=3)
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
    assert any(m.startswith("Sample Q-values from trained table") for m in messages)
    assert any(m.startswith("Highest Q-value") for m in messages)


def test_unreachable_goal_is_not_trained(lab):
    store = QTableStore()
    trainer = QTrainer(lab, store, seed=0)
    assert trainer.train(GoalDescription(9, 9), episodes=10) is None
    assert len(store) == 0


def test_dead_end_ends_episodes_without_failing():
    env = ToggleEnv(dead_end=True)
    store = QTableStore()
    report = QTrainer(env, store, seed=0).train(GoalDescription(2, 3), episodes=5)
    assert report.episodes_run == 5
    assert report.successes == 0
    assert all(record.steps == 0 for record in report.episodes)
    assert not store.get((2, 3)).any()


def test_early_stop_after_success_streak():
    config = TrainingConfig(early_stop_streak=2, early_stop_min_fraction=0.1)
    report = QTrainer(ToggleEnv(), QTableStore(), config, seed=0).train(
        GoalDescription(2, 3), episodes=200
    )
    # Every toggle episode succeeds; the fraction rule holds the stop until episode 20
    assert report.early_stopped
    assert report.episodes_run == 20
    assert report.published


def test_epsilon_decays_per_episode():
    config = no_early_stop(epsilon_decay=0.5, min_epsilon=0.05)
    report = QTrainer(ToggleEnv(), QTableStore(), config, seed=0).train(
        GoalDescription(2, 3), episodes=6, epsilon=0.8
    )
    assert [r.epsilon for r in report.episodes] == pytest.approx([0.8, 0.4, 0.2, 0.1, 0.05, 0.05])


def test_cancel_before_start_publishes_nothing(lab):
    store = QTableStore()
    event = threading.Event()
    event.set()
    report = QTrainer(lab, store, seed=0).train(GoalDescription(2, 3), episodes=100,
                                                cancel_event=event)
    assert report.cancelled
    assert report.episodes_run == 0
    assert not report.published
    assert (2, 3) not in store


def test_cancel_between_episodes(lab):
    store = QTableStore()
    report = QTrainer(lab, store, no_early_stop(), seed=0).train(
        GoalDescription(2, 3), episodes=100, cancel_event=CountingEvent(5)
    )
    assert report.cancelled
    assert report.episodes_run == 5
    assert (2, 3) not in store


def test_each_run_gets_fresh_illuminance_memory(lab, monkeypatch):
    seen = []
    original = q_trainer.compute_reward

    def recording_reward(goal, vector, memory, goal_reward, weights):
        if not any(m is memory for m, _ in seen):
            seen.append((memory, (memory.z1, memory.z2)))
        return original(goal, vector, memory, goal_reward, weights)

    monkeypatch.setattr(q_trainer, "compute_reward", recording_reward)
    trainer = QTrainer(lab, QTableStore(), seed=0)
    trainer.train(GoalDescription(3, 3), episodes=5)
    trainer.train(GoalDescription(0, 0), episodes=5)

    assert len(seen) == 2
    assert [initial for _, initial in seen] == [(0, 0), (0, 0)]


def test_more_episodes_raise_goal_adjacent_value():
    # Statistical: averaged over seeds, longer training pushes the value of
    # the best action next to the goal upward.
    goal = GoalDescription(2, 3)

    def adjacent_value(episodes, seed):
        lab = SmartRoomLab(sunshine_drift=0.0, seed=seed)
        store = QTableStore()
        QTrainer(lab, store, no_early_stop(), seed=seed).train(goal, episodes=episodes)
        state = lab.get_compatible_states([2, 2, 1, 1, 0, 0, 2])[0]
        actions = lab.get_applicable_actions(state)
        return store.get(goal.key)[state, actions].max()

    short = np.mean([adjacent_value(20, seed) for seed in range(3)])
    long = np.mean([adjacent_value(400, seed) for seed in range(3)])
    assert long >= short
    assert long > 0
