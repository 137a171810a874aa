"""
Exports públicos do módulo fsm/transitions.
"""

from fsm.transitions.rules import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)

__all__ = [
    "VALID_TRANSITIONS",
    "get_valid_targets",
    "is_transition_valid",
    "validate_transition_map",
]
