# =============================================================================
# Policy Server
# =============================================================================
"""
Greedy action selection from trained Q-tables.

Inference must always answer: every failure along the way (unknown goal,
unresolvable state, no applicable action, unknown action descriptor)
degrades to a fixed fallback action and a logged warning.
"""

import logging
from typing import Any, List, NamedTuple

from smartroom_rl.agents.descriptions import GoalDescription, StateDescription
from smartroom_rl.agents.q_table import QTableStore, best_action
from smartroom_rl.environment.base_env import LearningEnvironment
from smartroom_rl.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


FALLBACK_ACTION_TAG = "http://example.org/was#SetZ1Light"
FALLBACK_PAYLOAD_TAGS = ["Z1Light"]
FALLBACK_PAYLOAD = [True]


class ActionResponse(NamedTuple):
    """Information an agent needs to invoke the chosen action."""
    action_tag: str
    payload_tags: List[str]
    payload: List[Any]


def fallback_action() -> ActionResponse:
    """The default action returned whenever no learnt action is available."""
    return ActionResponse(
        FALLBACK_ACTION_TAG, list(FALLBACK_PAYLOAD_TAGS), list(FALLBACK_PAYLOAD)
    )


class PolicyServer:
    """
    Maps (goal, observed state) to the best known action.

    Parameters:
    -----------
    env : LearningEnvironment
        Environment used to resolve states and describe actions
    store : QTableStore
        Trained tables, read only
    """

    def __init__(self, env: LearningEnvironment, store: QTableStore):
        self.env = env
        self.store = store

    def resolve_state(self, description: StateDescription) -> int:
        """
        State index for an observed description.

        A complete description is matched against the environment's states
        and the first compatible one is used. Anything else, including no
        match or an environment error, falls back to the live state.
        """
        if description.is_complete:
            try:
                compatible = self.env.get_compatible_states(description.as_pattern())
            except Exception as e:
                logger.warning("Error resolving state description %s: %s", description, e)
            else:
                if compatible:
                    return compatible[0]
                logger.warning("No state matches description %s; using live state", description)
        return self.env.read_current_state()

    def best_action(self, goal: Any, state_description: Any) -> ActionResponse:
        """
        Best action toward `goal` from the observed state.

        Parameters:
        -----------
        goal : GoalDescription or sequence
            Target levels, e.g. [2, 3]
        state_description : StateDescription or sequence
            Observed state, e.g. [2, 2, True, False, True, True, 2]

        Returns:
        --------
        ActionResponse
            Tag, payload tags and payload of the chosen action
        """
        try:
            goal = GoalDescription.from_raw(goal)
        except ConfigurationError as e:
            logger.warning("Invalid goal description %r: %s", goal, e)
            return fallback_action()

        q_table = self.store.get(goal.key)
        if q_table is None:
            logger.warning("Q-table not found for goal: %s", goal)
            return fallback_action()

        try:
            description = StateDescription.from_raw(state_description)
        except ConfigurationError as e:
            logger.warning("Invalid state description %r: %s", state_description, e)
            description = StateDescription(())

        try:
            state = self.resolve_state(description)
            if not 0 <= state < q_table.shape[0]:
                logger.warning("Resolved state %d is outside the Q-table", state)
                return fallback_action()
            applicable = self.env.get_applicable_actions(state)
            if not applicable:
                logger.warning("No applicable actions for state %d", state)
                return fallback_action()
            action_index = best_action(q_table, state, applicable)
            action = self.env.get_action(action_index)
        except Exception as e:
            logger.warning("Environment error while selecting an action for goal %s: %s", goal, e)
            return fallback_action()

        if action is None:
            logger.error("Action object not found for index: %d", action_index)
            return fallback_action()

        logger.info(
            "Selected action for goal %s: %s (Q-value: %.3f)",
            goal, action.tag, q_table[state, action_index],
        )
        return ActionResponse(action.tag, list(action.payload_tags), list(action.payload))
