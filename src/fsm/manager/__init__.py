"""
Exports públicos do módulo fsm/manager.
"""

from fsm.manager.machine import DEFAULT_MAX_HISTORY, SubscriptionStateMachine

__all__ = [
    "DEFAULT_MAX_HISTORY",
    "SubscriptionStateMachine",
]
