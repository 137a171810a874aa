"""
Módulo FSM — máquina de estados da assinatura CDC.

Estrutura:
    - states/: SubscriptionState e estados terminais
    - transitions/: VALID_TRANSITIONS
    - manager/: SubscriptionStateMachine
    - types/: StateTransition, TransitionResult
"""

from fsm.manager import (
    DEFAULT_MAX_HISTORY,
    SubscriptionStateMachine,
)
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    SubscriptionState,
    is_terminal,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "DEFAULT_MAX_HISTORY",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "StateTransition",
    "SubscriptionState",
    "SubscriptionStateMachine",
    "TransitionResult",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "validate_transition_map",
]
