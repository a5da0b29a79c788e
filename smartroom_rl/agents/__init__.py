# =============================================================================
# Agents Module
# =============================================================================
"""
The Q-learning engine.

Architecture Overview:
----------------------

┌─────────────────┐     ┌──────────────────┐     ┌─────────────────┐
│  Goal [z1, z2]  │────▶│     QTrainer     │────▶│   QTableStore   │
│                 │     │  (episodes,      │     │  goal -> table  │
│                 │     │   reward, TD)    │     │                 │
└─────────────────┘     └──────────────────┘     └─────────────────┘
                                                          │
┌─────────────────┐     ┌──────────────────┐              │
│ Observed state  │────▶│   PolicyServer   │◀─────────────┘
│ [z1, z2, ...]   │     │  (argmax or      │────▶ action tag + payload
│                 │     │   fallback)      │
└─────────────────┘     └──────────────────┘

QLearner ties the pieces together around one environment.
"""

from smartroom_rl.agents.descriptions import GoalDescription, StateDescription
from smartroom_rl.agents.reward import (
    IlluminanceMemory,
    RewardWeights,
    compute_reward,
    MALFORMED_STATE_PENALTY,
)
from smartroom_rl.agents.q_table import (
    QTableStore,
    create_q_table,
    best_action,
    max_q_value,
    bellman_update,
)
from smartroom_rl.agents.policy import ActionResponse, PolicyServer, fallback_action
from smartroom_rl.agents.q_learner import QLearner

__all__ = [
    "GoalDescription",
    "StateDescription",
    "IlluminanceMemory",
    "RewardWeights",
    "compute_reward",
    "MALFORMED_STATE_PENALTY",
    "QTableStore",
    "create_q_table",
    "best_action",
    "max_q_value",
    "bellman_update",
    "ActionResponse",
    "PolicyServer",
    "fallback_action",
    "QLearner",
]
