"""
Máquina de estados da assinatura CDC.

Valida cada transição contra VALID_TRANSITIONS e mantém um histórico
limitado (o processo pode reconectar indefinidamente).
"""

from collections import deque
from typing import Any

from fsm.states.subscription import (
    DEFAULT_INITIAL_STATE,
    SubscriptionState,
    is_terminal,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

DEFAULT_MAX_HISTORY = 50


class SubscriptionStateMachine:
    """
    Máquina de estados de uma assinatura de streaming.

    Attributes:
        current_state: Estado atual da máquina
        history: Últimas transições realizadas (mais antiga primeiro)
    """

    __slots__ = ("_channel", "_current_state", "_history")

    def __init__(
        self,
        channel: str = "",
        initial_state: SubscriptionState | None = None,
        max_history: int = DEFAULT_MAX_HISTORY,
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: deque[StateTransition] = deque(maxlen=max_history)
        self._channel = channel

    @property
    def current_state(self) -> SubscriptionState:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_state)

    def can_transition_to(self, target: SubscriptionState) -> bool:
        return is_transition_valid(self._current_state, target)

    def transition(
        self,
        target: SubscriptionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'auth_failure')
            metadata: Dados adicionais para auditoria

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._current_state = target
        self._history.append(transition)
        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo do estado atual para observability e /events/status."""
        return {
            "channel": self._channel,
            "current_state": self._current_state.name,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in get_valid_targets(self._current_state)),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        return [t.to_log_dict() for t in self._history]
