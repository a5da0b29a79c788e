# =============================================================================
# Experiment Configuration
# =============================================================================
"""
Configuration management for training runs.

This module provides:
- YAML config loading and saving
- Default configurations
- Validation of Q-learning hyperparameters

Example config:
---------------
```yaml
name: "goal_2_3"
seed: 42
goal: [2, 3]

environment:
  sunshine_drift: 0.05
  initial_sunshine: 2

training:
  episodes: 500
  alpha: 0.1
  gamma: 0.9
  epsilon: 0.2
  goal_reward: 100.0

reward:
  light_cost: 2.0
```
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from smartroom_rl.agents.reward import RewardWeights
from smartroom_rl.exceptions import ConfigurationError


@dataclass
class LabConfig:
    """Simulated smart room configuration."""
    num_levels: int = 4
    sunshine_levels: int = 4
    light_gain: int = 2
    daylight_cap: int = 2
    initial_sunshine: int = 2
    sunshine_drift: float = 0.05
    settle_time: float = 0.0


@dataclass
class TrainingConfig:
    """Q-learning hyperparameters."""
    episodes: int = 500
    alpha: float = 0.1
    gamma: float = 0.9
    epsilon: float = 0.2
    goal_reward: float = 100.0

    # Episode structure
    max_steps_per_episode: int = 100
    min_random_actions: int = 3
    max_random_actions: int = 8

    # Exploration schedule (decay of 1.0 keeps epsilon fixed)
    epsilon_decay: float = 1.0
    min_epsilon: float = 0.01

    # Early stop after a streak of successful episodes
    early_stop_streak: int = 10
    early_stop_min_fraction: float = 0.5

    log_every: int = 100

    def validate(self) -> "TrainingConfig":
        """Raise ConfigurationError on out-of-range values."""
        if self.episodes < 0:
            raise ConfigurationError(f"episodes must be >= 0, got {self.episodes}")
        for name in ("alpha", "gamma", "epsilon", "epsilon_decay", "min_epsilon",
                     "early_stop_min_fraction"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")
        if self.max_steps_per_episode < 1:
            raise ConfigurationError("max_steps_per_episode must be >= 1")
        if not 0 <= self.min_random_actions <= self.max_random_actions:
            raise ConfigurationError(
                "random walk bounds must satisfy 0 <= min_random_actions <= max_random_actions"
            )
        if self.early_stop_streak < 1:
            raise ConfigurationError("early_stop_streak must be >= 1")
        return self


@dataclass
class ExperimentConfig:
    """
    Complete experiment configuration.

    Combines all sub-configs into one object.
    Can be loaded from YAML or created programmatically.
    """
    name: str = "experiment"
    seed: Optional[int] = 42
    goal: List[int] = field(default_factory=lambda: [2, 3])

    environment: LabConfig = field(default_factory=LabConfig)
    training: TrainingConfig = field(default_factory=TrainingConfig)
    reward: RewardWeights = field(default_factory=RewardWeights)

    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    def save(self, path: str) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ExperimentConfig":
        """Create from dictionary."""
        d = dict(d or {})
        try:
            if isinstance(d.get("environment"), dict):
                d["environment"] = LabConfig(**d["environment"])
            if isinstance(d.get("training"), dict):
                d["training"] = TrainingConfig(**d["training"])
            if isinstance(d.get("reward"), dict):
                d["reward"] = RewardWeights(**d["reward"])
            config = cls(**d)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        config.training.validate()
        return config


def load_config(path: str) -> ExperimentConfig:
    """
    Load configuration from YAML file.

    Parameters:
    -----------
    path : str
        Path to YAML config file

    Returns:
    --------
    ExperimentConfig
        Loaded configuration
    """
    with open(path, 'r') as f:
        d = yaml.safe_load(f)

    return ExperimentConfig.from_dict(d)


def create_default_config(name: str = "default") -> ExperimentConfig:
    """Create a default configuration."""
    return ExperimentConfig(name=name)
