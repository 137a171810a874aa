"""Gerenciamento de correlation_id para rastrear cada change event.

Cada evento é processado sob um correlation_id derivado do replay id;
tasks criadas durante o processamento (entrega ao webhook) herdam o
ContextVar, então seus logs carregam o mesmo id.

Uso:
    token = set_correlation_id(correlation_id_for_event(replay_id))
    try:
        ...  # processar evento
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from typing import Any

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (ou string vazia)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual.

    Args:
        correlation_id: ID a definir. Se None, gera um novo UUID.

    Returns:
        Token para reset posterior via reset_correlation_id().
    """
    value = correlation_id or generate_correlation_id()
    return _correlation_id.set(value)


def reset_correlation_id(token: Token[str]) -> None:
    """Restaura o correlation_id ao valor anterior."""
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())


def correlation_id_for_event(replay_id: Any) -> str:
    """correlation_id estável por evento; UUID quando não há replay id."""
    if replay_id is None:
        return generate_correlation_id()
    return f"replay-{replay_id}"
