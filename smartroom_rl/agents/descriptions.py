# =============================================================================
# Goal and State Descriptions
# =============================================================================
"""
Typed value objects for the goals and observed states agents send in.

Callers hand over loosely typed sequences such as ``[2, "3"]`` or
``[2, 2, True, False, True, True, 2]``. They are validated once here, so the
learner only ever works with plain integers.
"""

from collections.abc import Sequence as SequenceABC
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from smartroom_rl.exceptions import ConfigurationError


STATE_LENGTH = 7

_TRUE_STRINGS = {"true", "on", "up"}
_FALSE_STRINGS = {"false", "off", "down"}


def _is_sequence(raw: Any) -> bool:
    """Ordered, indexable containers only. Text, mappings and sets are rejected."""
    if isinstance(raw, (str, bytes)):
        return False
    return isinstance(raw, (SequenceABC, np.ndarray))


def parse_int(value: Any, name: str = "value") -> int:
    """
    Parse an integer from an int, an integral float or a numeric string.

    Booleans are rejected so that ``True`` never silently becomes level 1.
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got boolean {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ConfigurationError(f"{name} must be integral, got {value!r}")
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise ConfigurationError(f"{name} is not a number: {value!r}") from None
            return parse_int(number, name)
    # numpy integers and the like
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} is not a number: {value!r}") from None
    return parse_int(number, name)


def parse_field(value: Any, name: str = "field") -> Optional[int]:
    """Parse one state field: None stays a wildcard, booleans become 0/1."""
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return 1
        if lowered in _FALSE_STRINGS:
            return 0
    return parse_int(value, name)


@dataclass(frozen=True)
class GoalDescription:
    """
    Desired illuminance level per zone.

    Attributes:
    -----------
    z1_level : int
        Target illuminance in zone 1
    z2_level : int
        Target illuminance in zone 2
    """
    z1_level: int
    z2_level: int

    def __post_init__(self):
        for name in ("z1_level", "z2_level"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an int, got {value!r}")
            if value < 0:
                raise ConfigurationError(f"{name} must be non-negative, got {value}")

    @property
    def key(self) -> Tuple[int, int]:
        """Key selecting this goal's Q-table. Equal goals share a key."""
        return (self.z1_level, self.z2_level)

    def is_reached(self, state_vector: Sequence[int]) -> bool:
        """True if both zone levels of the state match the goal."""
        return (
            len(state_vector) >= 2
            and state_vector[0] == self.z1_level
            and state_vector[1] == self.z2_level
        )

    def as_pattern(self) -> list:
        """Partial state pattern matching every state at the goal levels."""
        return [self.z1_level, self.z2_level] + [None] * (STATE_LENGTH - 2)

    @classmethod
    def from_raw(cls, raw: Any) -> "GoalDescription":
        """
        Build a goal from a raw description.

        Accepts a GoalDescription, or any two-element sequence whose entries
        parse as integers, e.g. ``[2, 3]``, ``("2", "3")`` or ``[2.0, 3]``.
        """
        if isinstance(raw, cls):
            return raw
        if not _is_sequence(raw):
            raise ConfigurationError(f"Goal must be a pair of levels, got {raw!r}")
        if len(raw) != 2:
            raise ConfigurationError(f"Goal must have exactly 2 components, got {len(raw)}")
        return cls(parse_int(raw[0], "z1_level"), parse_int(raw[1], "z2_level"))

    def __str__(self):
        return f"[{self.z1_level}, {self.z2_level}]"


@dataclass(frozen=True)
class StateDescription:
    """
    An observed room state, possibly partial.

    ``fields`` holds one entry per state field; None entries are wildcards.
    A description is complete when it has exactly STATE_LENGTH fields.
    """
    fields: Tuple[Optional[int], ...]

    @property
    def is_complete(self) -> bool:
        return len(self.fields) == STATE_LENGTH

    def as_pattern(self) -> list:
        return list(self.fields)

    @classmethod
    def from_raw(cls, raw: Any) -> "StateDescription":
        """Build a description from a sequence such as ``[2, 2, True, False, 1, 1, 2]``."""
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return cls(())
        if not _is_sequence(raw):
            raise ConfigurationError(f"State description must be a sequence, got {raw!r}")
        return cls(tuple(parse_field(v, f"field {i}") for i, v in enumerate(raw)))

    def __str__(self):
        return str(list(self.fields))
