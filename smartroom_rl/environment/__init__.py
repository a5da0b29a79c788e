# =============================================================================
# Environment Module
# =============================================================================
"""
Environments the Q-learner can be trained against.

This module provides:
- LearningEnvironment: the contract the learner relies on
- Action: descriptor of one controllable operation
- SmartRoomLab: a simulated two-zone room (gymnasium environment)
"""

from smartroom_rl.environment.base_env import Action, LearningEnvironment
from smartroom_rl.environment.lab_env import SmartRoomLab, make_lab, STATE_FIELDS

__all__ = ["Action", "LearningEnvironment", "SmartRoomLab", "make_lab", "STATE_FIELDS"]
