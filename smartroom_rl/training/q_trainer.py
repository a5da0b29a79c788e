# =============================================================================
# Q-Learning Trainer
# =============================================================================
"""
Tabular Q-learning for one goal at a time.

Training Loop:
--------------
for episode in range(episodes):
    1. Random walk: a few random applicable actions to diversify the start
    2. Step loop (at most max_steps_per_episode steps):
       - stop if no action is applicable
       - pick an action epsilon-greedily
       - perform it, score the new state, apply the Bellman update
       - stop once both zones are at the goal level
    3. Decay epsilon
    4. Stop early after a long enough streak of successful episodes

The table is created at the start of a run and only published to the
store when the run completes, so inference never sees a half-trained table.
Training can be cancelled between episodes; a cancelled run publishes
nothing.
"""

import logging
import threading
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from smartroom_rl.agents.descriptions import GoalDescription
from smartroom_rl.agents.q_table import (
    QTableStore,
    bellman_update,
    best_action,
    create_q_table,
)
from smartroom_rl.agents.reward import IlluminanceMemory, RewardWeights, compute_reward
from smartroom_rl.environment.base_env import LearningEnvironment
from smartroom_rl.evaluation.metrics import format_q_table, summarize_q_table
from smartroom_rl.training.experiment_config import TrainingConfig

logger = logging.getLogger(__name__)


@dataclass
class EpisodeRecord:
    """Outcome of one training episode."""
    episode: int
    steps: int
    total_reward: float
    success: bool
    epsilon: float


@dataclass
class TrainingReport:
    """
    Summary of a training run.

    Advisory only: nothing in the learner reads it back.
    """
    goal: List[int]
    episodes_requested: int
    episodes_run: int = 0
    successes: int = 0
    max_q: float = 0.0
    early_stopped: bool = False
    cancelled: bool = False
    published: bool = False
    episodes: List[EpisodeRecord] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        if self.episodes_run == 0:
            return 0.0
        return self.successes / self.episodes_run

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["success_rate"] = self.success_rate
        return d


class QTrainer:
    """
    Trains Q-tables against a learning environment.

    Example:
    --------
    >>> trainer = QTrainer(lab, store, TrainingConfig(episodes=500))
    >>> report = trainer.train(GoalDescription(2, 3))
    >>> print(f"Success rate: {report.success_rate:.1%}")
    """

    def __init__(
        self,
        env: LearningEnvironment,
        store: QTableStore,
        config: Optional[TrainingConfig] = None,
        reward_weights: Optional[RewardWeights] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize the trainer.

        Parameters:
        -----------
        env : LearningEnvironment
            Environment to act in
        store : QTableStore
            Where finished tables are published
        config : TrainingConfig, optional
            Hyperparameters (defaults if omitted)
        reward_weights : RewardWeights, optional
            Reward component weights
        seed : int, optional
            Seed for exploration and random walks
        """
        self.env = env
        self.store = store
        self.config = (config or TrainingConfig()).validate()
        self.reward_weights = reward_weights or RewardWeights()
        self.rng = np.random.default_rng(seed)

    # -------------------------------------------------------------------------
    # Policy pieces
    # -------------------------------------------------------------------------
    def random_walk(self) -> int:
        """Perform a random number of random applicable actions; return the state reached."""
        n_actions = int(self.rng.integers(
            self.config.min_random_actions, self.config.max_random_actions + 1
        ))
        for _ in range(n_actions):
            actions = self.env.get_applicable_actions(self.env.read_current_state())
            if actions:
                self.env.perform_action(actions[int(self.rng.integers(len(actions)))])
        return self.env.read_current_state()

    def select_action(
        self,
        q_table: np.ndarray,
        state: int,
        actions: Sequence[int],
        epsilon: float,
    ) -> int:
        """Epsilon-greedy choice among the applicable actions."""
        if self.rng.random() < epsilon:
            return actions[int(self.rng.integers(len(actions)))]
        return best_action(q_table, state, actions)

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------
    def run_episode(
        self,
        q_table: np.ndarray,
        goal: GoalDescription,
        memory: IlluminanceMemory,
        alpha: float,
        gamma: float,
        epsilon: float,
        goal_reward: float,
        episode: int = 0,
    ) -> EpisodeRecord:
        """Run one episode, updating `q_table` in place."""
        state = self.random_walk()
        total_reward = 0.0
        success = False
        steps = 0

        for steps in range(1, self.config.max_steps_per_episode + 1):
            actions = self.env.get_applicable_actions(state)
            if not actions:
                steps -= 1
                break

            action = self.select_action(q_table, state, actions, epsilon)
            next_state = self.env.perform_action(action)
            vector = self.env.state_vector(next_state)
            reward = compute_reward(goal, vector, memory, goal_reward, self.reward_weights)
            total_reward += reward

            bellman_update(
                q_table, state, action, reward, next_state,
                self.env.get_applicable_actions(next_state), alpha, gamma,
            )
            state = next_state

            if goal.is_reached(vector):
                success = True
                break

        return EpisodeRecord(
            episode=episode,
            steps=steps,
            total_reward=total_reward,
            success=success,
            epsilon=epsilon,
        )

    def train(
        self,
        goal: GoalDescription,
        episodes: Optional[int] = None,
        alpha: Optional[float] = None,
        gamma: Optional[float] = None,
        epsilon: Optional[float] = None,
        goal_reward: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[TrainingReport]:
        """
        Train a fresh Q-table for `goal` and publish it.

        Arguments left as None take their value from the config.

        Returns:
        --------
        TrainingReport or None
            None if no state of the environment satisfies the goal
        """
        cfg = self.config
        episodes = cfg.episodes if episodes is None else episodes
        alpha = cfg.alpha if alpha is None else alpha
        gamma = cfg.gamma if gamma is None else gamma
        epsilon = cfg.epsilon if epsilon is None else epsilon
        goal_reward = cfg.goal_reward if goal_reward is None else goal_reward

        goal_states = self.env.get_compatible_states(goal.as_pattern())
        if not goal_states:
            logger.error("No goal states found for goal description: %s", goal)
            return None
        logger.info("Found %d goal states for %s", len(goal_states), goal)
        logger.info("Starting Q-Learning training with %d episodes", episodes)
        logger.info("Learning parameters: α=%s, γ=%s, ε=%s", alpha, gamma, epsilon)

        q_table = create_q_table(self.env.state_count(), self.env.action_count())
        memory = IlluminanceMemory()
        report = TrainingReport(goal=list(goal.key), episodes_requested=episodes)
        streak = 0

        for episode in range(episodes):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(
                    "Training for goal %s cancelled after %d episodes", goal, episode
                )
                report.cancelled = True
                break

            record = self.run_episode(
                q_table, goal, memory, alpha, gamma, epsilon, goal_reward, episode
            )
            report.episodes.append(record)
            report.episodes_run += 1
            report.successes += int(record.success)
            streak = streak + 1 if record.success else 0

            epsilon = max(cfg.min_epsilon, epsilon * cfg.epsilon_decay)

            if (episode + 1) % cfg.log_every == 0:
                logger.info(
                    "Training progress: %d/%d episodes completed", episode + 1, episodes
                )

            if (
                streak > cfg.early_stop_streak
                and episode + 1 >= cfg.early_stop_min_fraction * episodes
            ):
                logger.info(
                    "Early stop after %d episodes: %d consecutive successes",
                    episode + 1, streak,
                )
                report.early_stopped = True
                break

        if report.cancelled:
            return report

        self.store.put(goal.key, q_table)
        report.published = True
        report.max_q = float(q_table.max()) if q_table.size else 0.0

        logger.info("Q-Learning training completed for goal %s", goal)
        logger.info("Sample Q-values from trained table:\n%s", format_q_table(q_table, 3))
        if q_table.size:
            summary = summarize_q_table(q_table)
            logger.info(
                "Highest Q-value: %.3f (State: %d, Action: %d); success rate %.1f%%",
                summary.max_q, summary.best_state, summary.best_action,
                100 * report.success_rate,
            )
        return report
