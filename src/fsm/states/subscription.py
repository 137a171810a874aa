"""
Estados do ciclo de vida da assinatura CDC.

DISCONNECTED → AUTHENTICATING → SUBSCRIBING → ACTIVE
                     ↑                          │
                RECONNECTING ←──────────────────┘

FAILED e STOPPED são terminais.
"""

from enum import StrEnum


class SubscriptionState(StrEnum):
    """
    Estados canônicos da assinatura de streaming.

    Estados não-terminais:
        - DISCONNECTED: Processo iniciado, sem sessão
        - AUTHENTICATING: Login em andamento
        - SUBSCRIBING: Sessão obtida, aguardando ack do subscribe
        - ACTIVE: Recebendo eventos
        - RECONNECTING: Aguardando o delay fixo antes de refazer o login

    Estados terminais:
        - FAILED: Login inicial falhou (credenciais não se recuperam sozinhas)
        - STOPPED: Shutdown limpo solicitado
    """

    DISCONNECTED = "DISCONNECTED"
    AUTHENTICATING = "AUTHENTICATING"
    SUBSCRIBING = "SUBSCRIBING"
    ACTIVE = "ACTIVE"
    RECONNECTING = "RECONNECTING"

    FAILED = "FAILED"
    STOPPED = "STOPPED"

    def __str__(self) -> str:
        return self.value


TERMINAL_STATES: frozenset[SubscriptionState] = frozenset({
    SubscriptionState.FAILED,
    SubscriptionState.STOPPED,
})

DEFAULT_INITIAL_STATE: SubscriptionState = SubscriptionState.DISCONNECTED


def is_terminal(state: SubscriptionState) -> bool:
    """Verifica se o estado é terminal."""
    return state in TERMINAL_STATES
