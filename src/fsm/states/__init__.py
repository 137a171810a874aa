"""
Exports públicos do módulo fsm/states.
"""

from fsm.states.subscription import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    SubscriptionState,
    is_terminal,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "SubscriptionState",
    "is_terminal",
]
