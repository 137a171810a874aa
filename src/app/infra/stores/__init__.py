"""Stores — implementações concretas de armazenamento.

Módulos disponíveis:
    - memory_event_store: buffer newest-first dos eventos CDC recentes
"""

from __future__ import annotations

from app.infra.stores.memory_event_store import DEFAULT_MAX_EVENTS, MemoryEventStore

__all__ = [
    "DEFAULT_MAX_EVENTS",
    "MemoryEventStore",
]
