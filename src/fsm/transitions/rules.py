"""
Regras de transição válidas entre estados da assinatura.

Toda falha recuperável converge para RECONNECTING; só o login inicial
leva a FAILED. STOPPED é alcançável de qualquer estado não-terminal.
"""

from fsm.states.subscription import TERMINAL_STATES, SubscriptionState

TransitionMap = dict[SubscriptionState, frozenset[SubscriptionState]]

VALID_TRANSITIONS: TransitionMap = {
    SubscriptionState.DISCONNECTED: frozenset({
        SubscriptionState.AUTHENTICATING,
        SubscriptionState.STOPPED,
    }),

    # Login inicial falho → FAILED; login em reconexão falho → RECONNECTING
    SubscriptionState.AUTHENTICATING: frozenset({
        SubscriptionState.SUBSCRIBING,
        SubscriptionState.FAILED,
        SubscriptionState.RECONNECTING,
        SubscriptionState.STOPPED,
    }),

    # Subscribe rejeitado também segue o caminho de reconexão
    SubscriptionState.SUBSCRIBING: frozenset({
        SubscriptionState.ACTIVE,
        SubscriptionState.RECONNECTING,
        SubscriptionState.STOPPED,
    }),

    SubscriptionState.ACTIVE: frozenset({
        SubscriptionState.RECONNECTING,
        SubscriptionState.STOPPED,
    }),

    SubscriptionState.RECONNECTING: frozenset({
        SubscriptionState.AUTHENTICATING,
        SubscriptionState.STOPPED,
    }),

    SubscriptionState.FAILED: frozenset(),
    SubscriptionState.STOPPED: frozenset(),
}


def get_valid_targets(state: SubscriptionState) -> frozenset[SubscriptionState]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos (vazio se terminal)
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: SubscriptionState, to_state: SubscriptionState) -> bool:
    """Verifica se uma transição é permitida pelo mapa."""
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Estados terminais têm conjunto vazio
    - Todo estado não-terminal alcança STOPPED

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in SubscriptionState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for from_state, targets in VALID_TRANSITIONS.items():
        if from_state in TERMINAL_STATES:
            continue
        if SubscriptionState.STOPPED not in targets:
            errors.append(f"Estado {from_state.name} não alcança STOPPED")

    return errors
