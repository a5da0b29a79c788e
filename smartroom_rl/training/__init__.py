# =============================================================================
# Training Module
# =============================================================================
"""
Training pipeline for goal-conditioned Q-tables.

This module provides:
- QTrainer: epsilon-greedy tabular Q-learning with early stopping
- Experiment configuration loaded from YAML
"""

from smartroom_rl.training.experiment_config import (
    ExperimentConfig,
    LabConfig,
    TrainingConfig,
    load_config,
    create_default_config,
)
from smartroom_rl.training.q_trainer import QTrainer, TrainingReport, EpisodeRecord

__all__ = [
    "ExperimentConfig",
    "LabConfig",
    "TrainingConfig",
    "load_config",
    "create_default_config",
    "QTrainer",
    "TrainingReport",
    "EpisodeRecord",
]
