"""Buffer em memória dos eventos CDC mais recentes.

Ordem newest-first, capacidade fixa na construção; ao exceder, o evento
mais antigo é descartado. Sem persistência entre reinícios.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import TYPE_CHECKING

from app.protocols.event_store import EventStoreProtocol

if TYPE_CHECKING:
    from app.protocols.models import NormalizedChangeEvent

DEFAULT_MAX_EVENTS = 100


class MemoryEventStore(EventStoreProtocol):
    """Ring buffer newest-first de NormalizedChangeEvent.

    O único escritor é o callback do SubscriptionManager. Leitores (rotas
    HTTP, possivelmente em threads do pool) recebem uma cópia imutável
    tirada sob lock: veem o estado anterior ou posterior a um append,
    nunca um intermediário.
    """

    def __init__(self, max_events: int = DEFAULT_MAX_EVENTS) -> None:
        if max_events < 1:
            raise ValueError("max_events deve ser >= 1")
        self._capacity = max_events
        self._events: deque[NormalizedChangeEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, event: NormalizedChangeEvent) -> None:
        """Insere na frente; deque(maxlen) descarta o mais antigo no fim."""
        with self._lock:
            self._events.appendleft(event)

    def snapshot(self) -> tuple[NormalizedChangeEvent, ...]:
        """Cópia imutável, mais recente primeiro."""
        with self._lock:
            return tuple(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
