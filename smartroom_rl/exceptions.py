# =============================================================================
# Exceptions
# =============================================================================
"""
Error types raised by the smart-room learner.

Only configuration problems surface as exceptions. Lookup misses and
environment anomalies degrade to a fallback action or a penalty value and
are reported through logging instead.
"""


class SmartRoomError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SmartRoomError, ValueError):
    """
    A training parameter or goal component could not be parsed or is out of range.

    Raised at call entry so that a bad request aborts before any training
    work is done.
    """
