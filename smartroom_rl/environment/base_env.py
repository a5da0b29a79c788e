# =============================================================================
# Learning Environment Contract
# =============================================================================
"""
Abstract interface between the Q-learning engine and an environment.

The engine never builds state or action indices itself. It only asks the
environment to enumerate, resolve and execute them, so any discretized
environment that implements this contract can be learnt.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence


@dataclass(frozen=True)
class Action:
    """
    Descriptor of one controllable operation.

    Attributes:
    -----------
    index : int
        Environment-assigned action index
    tag : str
        Semantic annotation of the operation, e.g. "http://example.org/was#SetZ1Light"
    payload_tags : list
        Semantic annotations of the payload fields, e.g. ["Z1Light"]
    payload : list
        Payload values, e.g. [True]
    """
    index: int
    tag: str
    payload_tags: List[str] = field(default_factory=list)
    payload: List[Any] = field(default_factory=list)


class LearningEnvironment(ABC):
    """
    Base class for environments the learner can train against.

    Implementations must not be shared between concurrently running
    learners: performing an action changes the live state.
    """

    @abstractmethod
    def state_count(self) -> int:
        """Total number of enumerable states."""
        raise NotImplementedError("Must be implemented by subclass.")

    @abstractmethod
    def action_count(self) -> int:
        """Total number of actions."""
        raise NotImplementedError("Must be implemented by subclass.")

    @abstractmethod
    def read_current_state(self) -> int:
        """Index of the live state."""
        raise NotImplementedError("Must be implemented by subclass.")

    @abstractmethod
    def state_vector(self, state_index: int) -> List[int]:
        """
        Field values of a state as integers.

        For the smart room the order is
        [z1Level, z2Level, z1Light, z2Light, z1Blinds, z2Blinds, sunshine].
        """
        raise NotImplementedError("Must be implemented by subclass.")

    @abstractmethod
    def get_applicable_actions(self, state_index: int) -> List[int]:
        """Indices of the actions that can be executed from the given state."""
        raise NotImplementedError("Must be implemented by subclass.")

    @abstractmethod
    def perform_action(self, action_index: int) -> int:
        """
        Execute an action on the live environment.

        Returns the index of the state reached.
        """
        raise NotImplementedError("Must be implemented by subclass.")

    @abstractmethod
    def get_compatible_states(self, pattern: Sequence[Optional[Any]]) -> List[int]:
        """
        Indices of every state matching a (possibly partial) pattern.

        None entries in the pattern match any value.
        """
        raise NotImplementedError("Must be implemented by subclass.")

    @abstractmethod
    def get_action(self, action_index: int) -> Optional[Action]:
        """Descriptor of an action, or None if the index is unknown."""
        raise NotImplementedError("Must be implemented by subclass.")

    def current_state_vector(self) -> List[int]:
        """Field values of the live state."""
        return self.state_vector(self.read_current_state())
