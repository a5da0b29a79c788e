# =============================================================================
# Q-Table Store
# =============================================================================
"""
Dense Q-tables keyed by goal, and the table operations the learner needs.

A Q-table is a numpy array of shape (state_count, action_count) holding the
expected discounted return of every (state, action) pair for one goal.

Action selection always looks at the applicable actions only. When several
actions share the maximum value the one with the lowest index wins.
"""

from typing import Dict, Iterator, Optional, Sequence, Tuple

import numpy as np


GoalKey = Tuple[int, int]


def create_q_table(state_count: int, action_count: int) -> np.ndarray:
    """Zero-initialized table of shape (state_count, action_count)."""
    return np.zeros((state_count, action_count), dtype=np.float64)


def best_action(q_table: np.ndarray, state: int, actions: Sequence[int]) -> int:
    """
    Applicable action with the highest Q-value at a state.

    Ties go to the lowest action index (np.argmax returns the first maximum
    over the sorted actions). `actions` must not be empty.
    """
    actions = sorted(actions)
    values = q_table[state, actions]
    return actions[int(np.argmax(values))]


def max_q_value(q_table: np.ndarray, state: int, actions: Sequence[int]) -> float:
    """Maximum Q-value over the given actions, 0.0 if there are none."""
    actions = list(actions)
    if not actions:
        return 0.0
    return float(np.max(q_table[state, actions]))


def bellman_update(
    q_table: np.ndarray,
    state: int,
    action: int,
    reward: float,
    next_state: int,
    next_actions: Sequence[int],
    alpha: float,
    gamma: float,
) -> float:
    """
    Apply one Q-learning update in place and return the new value.

    Q(s,a) := Q(s,a) + alpha * [r + gamma * max_a' Q(s',a') - Q(s,a)]
    where the max runs over the applicable actions at s'.
    """
    current = q_table[state, action]
    target = reward + gamma * max_q_value(q_table, next_state, next_actions)
    updated = current + alpha * (target - current)
    q_table[state, action] = updated
    return float(updated)


class QTableStore:
    """
    Registry of trained Q-tables, one per goal key.

    Tables are only stored once training for their goal has finished, and
    storing a table for an existing key replaces the old one. Nothing is
    ever evicted.

    Not thread-safe: callers serialize access.
    """

    def __init__(self):
        self._tables: Dict[GoalKey, np.ndarray] = {}

    def put(self, key: GoalKey, q_table: np.ndarray) -> None:
        self._tables[key] = q_table

    def get(self, key: GoalKey) -> Optional[np.ndarray]:
        return self._tables.get(key)

    def keys(self):
        return self._tables.keys()

    def __contains__(self, key) -> bool:
        return key in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[GoalKey]:
        return iter(self._tables)
