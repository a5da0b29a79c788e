# =============================================================================
# Reward Model
# =============================================================================
"""
Reward shaping for goal-conditioned lighting control.

The reward of a step is built from these components:

1. STEP COST
   A small negative reward per step, so shorter paths score higher.

2. GOAL BONUS
   When both zones are at the target level the step earns `goal_reward`
   and nothing else is added.

3. PROXIMITY
   Otherwise a bonus of
       proximity_fraction * goal_reward / (1 + |z1 - t1| + |z2 - t2|)
   gives a denser signal than the goal bonus alone.

4. ENERGY
   Each light that is on costs `light_cost`; each blind that is up costs
   the smaller `blinds_cost`.

5. SMOOTHNESS
   Changing a zone's illuminance costs `smoothness_cost` per level,
   relative to the previously observed levels.

6. DAYLIGHT CONFLICT
   With sunshine at `daylight_threshold` or above, a zone with blinds up
   AND light on costs an extra `daylight_conflict_cost`.

Components 4-6 always apply on steps that miss the goal.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from smartroom_rl.agents.descriptions import GoalDescription, STATE_LENGTH


# Returned for state vectors that are too short to score
MALFORMED_STATE_PENALTY = -10.0


@dataclass
class RewardWeights:
    """Weights of the reward components."""
    step_cost: float = -0.1
    proximity_fraction: float = 0.1
    light_cost: float = 2.0
    blinds_cost: float = 0.02
    smoothness_cost: float = 0.1
    daylight_threshold: int = 2
    daylight_conflict_cost: float = 1.0


@dataclass
class IlluminanceMemory:
    """
    Most recently observed illuminance per zone.

    Belongs to a single training run; the learner creates a fresh one at
    the start of every run.
    """
    z1: int = 0
    z2: int = 0

    def remember(self, z1: int, z2: int) -> None:
        self.z1 = z1
        self.z2 = z2


def compute_reward(
    goal: GoalDescription,
    state_vector: Sequence[int],
    memory: IlluminanceMemory,
    goal_reward: float,
    weights: Optional[RewardWeights] = None,
) -> float:
    """
    Score the state reached after a step.

    Parameters:
    -----------
    goal : GoalDescription
        Target levels
    state_vector : sequence of int
        [z1Level, z2Level, z1Light, z2Light, z1Blinds, z2Blinds, sunshine]
    memory : IlluminanceMemory
        Previously observed levels; updated to the current levels
    goal_reward : float
        Bonus for reaching the goal
    weights : RewardWeights, optional
        Component weights (defaults if omitted)

    Returns:
    --------
    float
        The reward, or MALFORMED_STATE_PENALTY if the vector is too short
    """
    if weights is None:
        weights = RewardWeights()
    if state_vector is None or len(state_vector) < STATE_LENGTH:
        return MALFORMED_STATE_PENALTY

    z1, z2 = int(state_vector[0]), int(state_vector[1])
    z1_light, z2_light = state_vector[2] == 1, state_vector[3] == 1
    z1_blinds, z2_blinds = state_vector[4] == 1, state_vector[5] == 1
    sunshine = int(state_vector[6])

    prev_z1, prev_z2 = memory.z1, memory.z2
    memory.remember(z1, z2)

    reward = weights.step_cost

    if z1 == goal.z1_level and z2 == goal.z2_level:
        return reward + goal_reward

    distance = abs(z1 - goal.z1_level) + abs(z2 - goal.z2_level)
    reward += weights.proximity_fraction * goal_reward / (1 + distance)

    reward -= weights.light_cost * (z1_light + z2_light)
    reward -= weights.blinds_cost * (z1_blinds + z2_blinds)

    reward -= weights.smoothness_cost * (abs(z1 - prev_z1) + abs(z2 - prev_z2))

    if sunshine >= weights.daylight_threshold:
        conflicts = (z1_blinds and z1_light) + (z2_blinds and z2_light)
        reward -= weights.daylight_conflict_cost * conflicts

    return reward
