# =============================================================================
# Smart Room Lab
# =============================================================================
"""
Simulated two-zone smart room used to train and serve lighting policies.

The room has one light and one set of blinds per zone, and a sunshine
sensor shared by both zones. Every actuator setting yields a discrete
illuminance level per zone.

Key Concepts:
-------------

STATE VECTOR (7 fields):
    [z1Level, z2Level, z1Light, z2Light, z1Blinds, z2Blinds, sunshine]
- z1Level, z2Level: illuminance level per zone (0..num_levels-1)
- z1Light, z2Light: 1 if the zone light is on
- z1Blinds, z2Blinds: 1 if the zone blinds are up
- sunshine: outdoor sunshine level (0..sunshine_levels-1)

Every combination of field values is enumerated and gets a state index,
including combinations the physics below never produces. This keeps the
index space simple and lets callers describe any state they observe.

ACTIONS (8):
0: SetZ1Light(true)    1: SetZ1Light(false)
2: SetZ1Blinds(true)   3: SetZ1Blinds(false)
4: SetZ2Light(true)    5: SetZ2Light(false)
6: SetZ2Blinds(true)   7: SetZ2Blinds(false)
An action is applicable only if it changes its actuator.

ILLUMINANCE:
    level = min(max_level, light_gain * light + blinds * min(sunshine, daylight_cap))
After each action the sunshine may drift by one level with probability
`sunshine_drift`.
"""

import itertools
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import gymnasium as gym
from gymnasium import spaces
import numpy as np

from smartroom_rl.environment.base_env import Action, LearningEnvironment


ACTION_TAG_PREFIX = "http://example.org/was#"

# Positions in the state vector
Z1_LEVEL, Z2_LEVEL, Z1_LIGHT, Z2_LIGHT, Z1_BLINDS, Z2_BLINDS, SUNSHINE = range(7)
STATE_FIELDS = [
    "z1Level", "z2Level", "z1Light", "z2Light",
    "z1Blinds", "z2Blinds", "sunshine",
]


class SmartRoomLab(gym.Env, LearningEnvironment):
    """
    Gymnasium environment for the smart room, implementing the learner's
    environment contract.

    The gymnasium API (`reset` / `step`) is convenient for rollouts; the
    learner itself only uses the `LearningEnvironment` methods. Rewards are
    goal-dependent, so `step` always returns 0.0 and leaves reward shaping
    to the learner.

    Example:
    --------
    >>> lab = SmartRoomLab(sunshine_drift=0.0)
    >>> state, info = lab.reset(options={"state_vector": [0, 0, 0, 0, 0, 0, 2]})
    >>> lab.get_applicable_actions(state)
    [0, 2, 4, 6]
    >>> lab.state_vector(lab.perform_action(0))
    [2, 0, 1, 0, 0, 0, 2]
    """

    metadata = {"render_modes": ["ansi"]}

    def __init__(
        self,
        num_levels: int = 4,
        sunshine_levels: int = 4,
        light_gain: int = 2,
        daylight_cap: int = 2,
        initial_sunshine: int = 2,
        sunshine_drift: float = 0.05,
        settle_time: float = 0.0,
        seed: Optional[int] = None,
    ):
        """
        Initialize the lab.

        Parameters:
        -----------
        num_levels : int
            Number of illuminance levels per zone
        sunshine_levels : int
            Number of outdoor sunshine levels
        light_gain : int
            Illuminance levels added by a light that is on
        daylight_cap : int
            Maximum levels contributed by open blinds
        initial_sunshine : int
            Sunshine level at construction time
        sunshine_drift : float
            Probability that sunshine moves by one level after an action
        settle_time : float
            Seconds to wait after each action so the room can settle
        seed : int, optional
            Random seed for reproducibility
        """
        super().__init__()
        if not 0 <= initial_sunshine < sunshine_levels:
            raise ValueError(
                f"initial_sunshine must be in [0, {sunshine_levels}), got {initial_sunshine}"
            )

        self.num_levels = num_levels
        self.sunshine_levels = sunshine_levels
        self.light_gain = light_gain
        self.daylight_cap = daylight_cap
        self.sunshine_drift = sunshine_drift
        self.settle_time = settle_time
        self._rng = np.random.default_rng(seed)

        # Enumerate the full state space in field order
        ranges = [
            range(num_levels), range(num_levels),
            range(2), range(2), range(2), range(2),
            range(sunshine_levels),
        ]
        self._states: List[Tuple[int, ...]] = list(itertools.product(*ranges))
        self._index: Dict[Tuple[int, ...], int] = {
            s: i for i, s in enumerate(self._states)
        }
        self._actions = self._build_actions()

        self.observation_space = spaces.Discrete(len(self._states))
        self.action_space = spaces.Discrete(len(self._actions))

        self._state = self._settled(
            [0, 0, 0, 0, 0, 0, initial_sunshine]
        )

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------
    @staticmethod
    def _build_actions() -> List[Action]:
        actions = []
        for zone in (1, 2):
            for device in ("Light", "Blinds"):
                for value in (True, False):
                    actions.append(Action(
                        index=len(actions),
                        tag=f"{ACTION_TAG_PREFIX}SetZ{zone}{device}",
                        payload_tags=[f"Z{zone}{device}"],
                        payload=[value],
                    ))
        return actions

    def _actuator_slot(self, action: Action) -> int:
        zone = 0 if "Z1" in action.payload_tags[0] else 1
        if action.payload_tags[0].endswith("Light"):
            return Z1_LIGHT + zone
        return Z1_BLINDS + zone

    def _zone_level(self, light: int, blinds: int, sunshine: int) -> int:
        level = self.light_gain * light + blinds * min(sunshine, self.daylight_cap)
        return min(self.num_levels - 1, level)

    def _settled(self, vector: List[int]) -> Tuple[int, ...]:
        """Recompute both zone levels from the actuators and sunshine."""
        vector = list(vector)
        vector[Z1_LEVEL] = self._zone_level(vector[Z1_LIGHT], vector[Z1_BLINDS], vector[SUNSHINE])
        vector[Z2_LEVEL] = self._zone_level(vector[Z2_LIGHT], vector[Z2_BLINDS], vector[SUNSHINE])
        return tuple(vector)

    # -------------------------------------------------------------------------
    # LearningEnvironment contract
    # -------------------------------------------------------------------------
    def state_count(self) -> int:
        return len(self._states)

    def action_count(self) -> int:
        return len(self._actions)

    def read_current_state(self) -> int:
        return self._index[self._state]

    def state_vector(self, state_index: int) -> List[int]:
        return list(self._states[state_index])

    def get_applicable_actions(self, state_index: int) -> List[int]:
        vector = self._states[state_index]
        return [
            a.index for a in self._actions
            if vector[self._actuator_slot(a)] != int(a.payload[0])
        ]

    def perform_action(self, action_index: int) -> int:
        action = self._actions[action_index]
        vector = list(self._state)
        vector[self._actuator_slot(action)] = int(action.payload[0])

        if self.sunshine_drift > 0 and self._rng.random() < self.sunshine_drift:
            step = 1 if self._rng.random() < 0.5 else -1
            vector[SUNSHINE] = int(np.clip(vector[SUNSHINE] + step, 0, self.sunshine_levels - 1))

        self._state = self._settled(vector)
        if self.settle_time > 0:
            time.sleep(self.settle_time)
        return self.read_current_state()

    def get_compatible_states(self, pattern: Sequence[Optional[Any]]) -> List[int]:
        if len(pattern) > len(STATE_FIELDS):
            return []
        wanted = [(i, int(v)) for i, v in enumerate(pattern) if v is not None]
        return [
            idx for idx, state in enumerate(self._states)
            if all(state[i] == v for i, v in wanted)
        ]

    def get_action(self, action_index: int) -> Optional[Action]:
        if 0 <= action_index < len(self._actions):
            return self._actions[action_index]
        return None

    # -------------------------------------------------------------------------
    # Gymnasium API
    # -------------------------------------------------------------------------
    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Reset the room.

        Options:
        --------
        state_vector : list
            Exact 7-field state to start from (taken as given, not settled)
        sunshine : int
            Sunshine level for a randomized start

        Without a state vector the actuators are randomized and the levels
        settled from them.
        """
        super().reset(seed=seed)
        if seed is not None:
            self._rng = np.random.default_rng(seed)
        options = options or {}

        if "state_vector" in options:
            vector = tuple(int(v) for v in options["state_vector"])
            if vector not in self._index:
                raise ValueError(f"Unknown state vector: {list(vector)}")
            self._state = vector
        else:
            sunshine = options.get("sunshine")
            if sunshine is None:
                sunshine = int(self._rng.integers(self.sunshine_levels))
            actuators = [int(v) for v in self._rng.integers(0, 2, size=4)]
            self._state = self._settled([0, 0] + actuators + [int(sunshine)])

        return self.read_current_state(), self._info()

    def step(self, action: int) -> Tuple[int, float, bool, bool, Dict[str, Any]]:
        state = self.perform_action(int(action))
        info = self._info()
        info["action_tag"] = self._actions[int(action)].tag
        return state, 0.0, False, False, info

    def render(self) -> str:
        return ", ".join(f"{n}={v}" for n, v in zip(STATE_FIELDS, self._state))

    def _info(self) -> Dict[str, Any]:
        return {"state_vector": list(self._state)}


# =============================================================================
# Convenience functions
# =============================================================================

def make_lab(**kwargs) -> SmartRoomLab:
    """Create a smart room lab with default physics."""
    return SmartRoomLab(**kwargs)


# =============================================================================
# Quick test
# =============================================================================
if __name__ == "__main__":
    print("Testing SmartRoomLab...")
    print()

    lab = make_lab(seed=42)
    print(f"States: {lab.state_count()}, actions: {lab.action_count()}")

    state, info = lab.reset(options={"state_vector": [0, 0, 0, 0, 0, 0, 2]})
    print(f"Start: {lab.render()}")

    for action in lab.get_applicable_actions(state)[:3]:
        state, _, _, _, info = lab.step(action)
        print(f"  {info['action_tag']:<40} -> {lab.render()}")

    print()
    print("✓ SmartRoomLab test passed!")
