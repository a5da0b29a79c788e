# =============================================================================
# Q-Learner
# =============================================================================
"""
Goal-conditioned Q-learner bound to one environment.

This is the object calling agents talk to. It owns:
- the environment binding
- the registry of trained Q-tables (one per goal)
- a trainer and a policy server sharing that registry

Operations:
-----------
calculate_q(goal, episodes, alpha, gamma, epsilon, reward)
    Train and store a Q-table for the goal.
get_action_from_state(goal, state_description)
    Best known action for the observed state (fallback action if unknown).
get_q_table_status(goal)
    One-line diagnostic of the goal's Q-table.

Concurrency:
------------
The learner is NOT thread-safe. Training and inference mutate the live
environment and the registry without locks, so whoever hosts the learner
must run at most one call at a time (see demo/app.py, which holds a lock
around every call). Long training runs can be cancelled between episodes
by setting the `cancel_event` passed to `calculate_q`.
"""

import logging
import math
import threading
from typing import Any, Optional

import numpy as np

from smartroom_rl.agents.descriptions import GoalDescription, parse_int
from smartroom_rl.agents.policy import ActionResponse, PolicyServer
from smartroom_rl.agents.q_table import QTableStore
from smartroom_rl.agents.reward import RewardWeights
from smartroom_rl.environment.base_env import LearningEnvironment
from smartroom_rl.evaluation.metrics import format_q_table, format_status, summarize_q_table
from smartroom_rl.exceptions import ConfigurationError
from smartroom_rl.training.experiment_config import ExperimentConfig, TrainingConfig
from smartroom_rl.training.q_trainer import QTrainer, TrainingReport

logger = logging.getLogger(__name__)


def _parse_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got boolean {value!r}")
    try:
        number = float(str(value).strip())
    except ValueError:
        raise ConfigurationError(f"{name} is not a number: {value!r}") from None
    if not math.isfinite(number):
        raise ConfigurationError(f"{name} must be finite, got {value!r}")
    return number


class QLearner:
    """
    Learns and serves lighting policies for arbitrary illuminance goals.

    Example:
    --------
    >>> learner = QLearner(SmartRoomLab(seed=0))
    >>> report = learner.calculate_q([2, 3], 500, 0.1, 0.9, 0.2, 100)
    >>> response = learner.get_action_from_state([2, 3], [0, 2, 0, 1, 0, 0, 2])
    >>> print(response.action_tag, response.payload_tags, response.payload)
    """

    def __init__(
        self,
        env: LearningEnvironment,
        training_config: Optional[TrainingConfig] = None,
        reward_weights: Optional[RewardWeights] = None,
        seed: Optional[int] = None,
    ):
        self.env = env
        self.q_tables = QTableStore()
        self.trainer = QTrainer(
            env, self.q_tables, training_config, reward_weights, seed=seed
        )
        self.policy = PolicyServer(env, self.q_tables)

        logger.info("Initialized with a state space of n=%d", env.state_count())
        logger.info("Initialized with an action space of m=%d", env.action_count())

    @classmethod
    def from_config(cls, config: ExperimentConfig, env: Optional[LearningEnvironment] = None) -> "QLearner":
        """Build a learner (and, if not given, a simulated lab) from a config."""
        if env is None:
            from smartroom_rl.environment.lab_env import SmartRoomLab
            env = SmartRoomLab(seed=config.seed, **vars(config.environment))
        return cls(env, config.training, config.reward, seed=config.seed)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------
    def calculate_q(
        self,
        goal: Any,
        episodes: Any,
        alpha: Any,
        gamma: Any,
        epsilon: Any,
        reward: Any,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[TrainingReport]:
        """
        Compute a Q-table for a goal and store it.

        Parameters:
        -----------
        goal : sequence
            Desired [z1Level, z2Level], e.g. [2, 3]
        episodes : int or str
            Number of training episodes
        alpha : float or str
            Learning rate in [0, 1]
        gamma : float or str
            Discount factor in [0, 1]
        epsilon : float or str
            Exploration probability in [0, 1]
        reward : float or str
            Reward for reaching the goal
        cancel_event : threading.Event, optional
            Set it to stop training at the next episode boundary

        Returns:
        --------
        TrainingReport or None
            None if the environment has no state at the goal levels

        Raises:
        -------
        ConfigurationError
            If a parameter cannot be parsed or is out of range
        """
        goal = GoalDescription.from_raw(goal)
        episodes = parse_int(episodes, "episodes")
        if episodes < 0:
            raise ConfigurationError(f"episodes must be >= 0, got {episodes}")
        alpha = _parse_float(alpha, "alpha")
        gamma = _parse_float(gamma, "gamma")
        epsilon = _parse_float(epsilon, "epsilon")
        goal_reward = _parse_float(reward, "reward")
        for name, value in (("alpha", alpha), ("gamma", gamma), ("epsilon", epsilon)):
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")

        return self.trainer.train(
            goal,
            episodes=episodes,
            alpha=alpha,
            gamma=gamma,
            epsilon=epsilon,
            goal_reward=goal_reward,
            cancel_event=cancel_event,
        )

    def get_action_from_state(self, goal: Any, state_description: Any) -> ActionResponse:
        """
        Next best action for a goal from the described state.

        Never raises; unknown goals and unresolvable states yield the
        fallback action.
        """
        return self.policy.best_action(goal, state_description)

    def get_q_table_status(self, goal: Any) -> str:
        """Max Q-value, non-zero/positive entry counts and a readiness verdict."""
        try:
            goal = GoalDescription.from_raw(goal)
        except ConfigurationError as e:
            return f"Invalid goal description {goal!r}: {e}"
        q_table = self.q_tables.get(goal.key)
        summary = summarize_q_table(q_table) if q_table is not None else None
        return format_status(goal, summary)

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------
    def get_q_table(self, goal: Any) -> Optional[np.ndarray]:
        """The stored table for a goal, or None."""
        return self.q_tables.get(GoalDescription.from_raw(goal).key)

    def print_q_table(self, goal: Any, max_states: int = 10) -> None:
        q_table = self.get_q_table(goal)
        if q_table is None:
            print(f"No Q-table trained for goal {goal}")
            return
        print(format_q_table(q_table, max_states))
