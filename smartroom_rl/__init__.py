# =============================================================================
# Smart Room Q-Learning
# =============================================================================
"""
Goal-conditioned tabular Q-learning for a two-zone smart room.

Given a goal (desired illuminance level per zone), the learner trains a
table of expected returns for every (state, action) pair and then maps an
observed room state to the best known action toward that goal.

Subpackages:
- environment: learning-environment contract and the simulated lab
- agents: goal/state descriptions, reward model, Q-tables, policy, learner
- training: trainer and YAML configuration
- evaluation: Q-table diagnostics and greedy-policy metrics
"""

__version__ = "0.1.0"

from smartroom_rl.agents.q_learner import QLearner
from smartroom_rl.environment.lab_env import SmartRoomLab

__all__ = ["QLearner", "SmartRoomLab"]
