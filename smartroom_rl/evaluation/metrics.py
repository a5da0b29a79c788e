# =============================================================================
# Evaluation Metrics
# =============================================================================
"""
Metrics and diagnostics for trained Q-tables.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional
import numpy as np

from smartroom_rl.agents.descriptions import GoalDescription
from smartroom_rl.agents.q_table import best_action
from smartroom_rl.agents.reward import IlluminanceMemory, RewardWeights, compute_reward


READY = "READY"
PARTIAL = "PARTIAL"
UNTRAINED = "UNTRAINED"


def compute_success_rate(
    successes: List[bool],
) -> float:
    """
    Compute success rate.

    Parameters:
    -----------
    successes : List[bool]
        List of success flags per episode

    Returns:
    --------
    float
        Success rate (0.0 to 1.0)
    """
    if not successes:
        return 0.0
    return sum(successes) / len(successes)


@dataclass
class QTableSummary:
    """Aggregate view of one Q-table."""
    max_q: float
    best_state: int
    best_action: int
    non_zero: int
    positive: int
    total: int
    verdict: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize_q_table(q_table: np.ndarray) -> QTableSummary:
    """
    Summarize a Q-table and judge whether it is usable.

    The verdict is READY when some entry is positive (the goal reward has
    propagated), PARTIAL when values were updated but none is positive, and
    UNTRAINED when the table is still all zeros.
    """
    flat_index = int(np.argmax(q_table))
    best_state, best_act = np.unravel_index(flat_index, q_table.shape)
    max_q = float(q_table[best_state, best_act])
    non_zero = int(np.count_nonzero(q_table))
    positive = int(np.count_nonzero(q_table > 0))

    if positive > 0 and max_q > 0:
        verdict = READY
    elif non_zero > 0:
        verdict = PARTIAL
    else:
        verdict = UNTRAINED

    return QTableSummary(
        max_q=max_q,
        best_state=int(best_state),
        best_action=int(best_act),
        non_zero=non_zero,
        positive=positive,
        total=int(q_table.size),
        verdict=verdict,
    )


def format_status(goal: GoalDescription, summary: Optional[QTableSummary]) -> str:
    """Human-readable status line for a goal's Q-table."""
    if summary is None:
        return f"No Q-table trained for goal {goal}"
    return (
        f"Q-table for goal {goal}: "
        f"max Q={summary.max_q:.3f} "
        f"(state {summary.best_state}, action {summary.best_action}), "
        f"non-zero entries={summary.non_zero}/{summary.total}, "
        f"positive entries={summary.positive}, "
        f"status={summary.verdict}"
    )


def format_q_table(q_table: np.ndarray, max_states: int = 10) -> str:
    """Printable view of the first `max_states` rows of a Q-table."""
    lines = ["Q matrix"]
    shown = min(max_states, q_table.shape[0])
    for state in range(shown):
        values = " ".join(f"{v:6.2f}" for v in q_table[state])
        lines.append(f"From state {state}:  {values}")
    if q_table.shape[0] > shown:
        lines.append(f"... ({q_table.shape[0] - shown} more states not shown)")
    return "\n".join(lines)


class EvaluationSuite:
    """
    Greedy rollouts of a trained Q-table in the simulated lab.

    Example:
    --------
    >>> suite = EvaluationSuite(lab, max_steps=20)
    >>> metrics = suite.evaluate(q_table, GoalDescription(2, 3), num_episodes=50)
    >>> print(f"Success rate: {metrics['success_rate']:.1%}")
    """

    def __init__(
        self,
        env,
        max_steps: int = 20,
        goal_reward: float = 100.0,
        reward_weights: Optional[RewardWeights] = None,
        seed: Optional[int] = 42,
    ):
        """
        Initialize evaluation suite.

        Parameters:
        -----------
        env : SmartRoomLab
            Environment with a gymnasium `reset`
        max_steps : int
            Maximum steps per episode
        goal_reward : float
            Goal bonus used when scoring rollouts
        reward_weights : RewardWeights, optional
            Reward component weights
        seed : int, optional
            Seed for the first reset
        """
        self.env = env
        self.max_steps = max_steps
        self.goal_reward = goal_reward
        self.reward_weights = reward_weights or RewardWeights()
        self.seed = seed

    def evaluate(
        self,
        q_table: np.ndarray,
        goal: GoalDescription,
        num_episodes: int = 100,
        start_options: Optional[Dict[str, Any]] = None,
        verbose: bool = False,
    ) -> Dict[str, float]:
        """
        Run greedy episodes and collect metrics.

        Returns:
        --------
        dict
            success_rate, mean_reward, std_reward, mean_length, std_length
        """
        successes, rewards, lengths = [], [], []

        for ep in range(num_episodes):
            seed = self.seed if ep == 0 else None
            state, _ = self.env.reset(seed=seed, options=start_options)
            memory = IlluminanceMemory(*self.env.state_vector(state)[:2])

            total_reward = 0.0
            success = goal.is_reached(self.env.state_vector(state))
            steps = 0
            while not success and steps < self.max_steps:
                actions = self.env.get_applicable_actions(state)
                if not actions:
                    break
                state = self.env.perform_action(best_action(q_table, state, actions))
                vector = self.env.state_vector(state)
                total_reward += compute_reward(
                    goal, vector, memory, self.goal_reward, self.reward_weights
                )
                success = goal.is_reached(vector)
                steps += 1

            successes.append(success)
            rewards.append(total_reward)
            lengths.append(steps)

        metrics = {
            "success_rate": compute_success_rate(successes),
            "mean_reward": float(np.mean(rewards)) if rewards else 0.0,
            "std_reward": float(np.std(rewards)) if rewards else 0.0,
            "mean_length": float(np.mean(lengths)) if lengths else 0.0,
            "std_length": float(np.std(lengths)) if lengths else 0.0,
        }

        if verbose:
            print(f"\n=== Evaluation Results (goal {goal}) ===")
            print(f"Success rate: {metrics['success_rate']:.1%}")
            print(f"Mean reward:  {metrics['mean_reward']:.3f} ± {metrics['std_reward']:.3f}")
            print(f"Mean length:  {metrics['mean_length']:.1f} ± {metrics['std_length']:.1f}")

        return metrics
