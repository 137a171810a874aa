"""Protocolos do buffer de eventos recentes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import NormalizedChangeEvent


class EventStoreReaderProtocol(Protocol):
    """Leitura para superfícies externas (ex: GET /events)."""

    @property
    def capacity(self) -> int: ...

    def snapshot(self) -> tuple[NormalizedChangeEvent, ...]: ...

    def __len__(self) -> int: ...


class EventStoreProtocol(EventStoreReaderProtocol, Protocol):
    """Contrato completo; apenas o SubscriptionManager escreve."""

    def append(self, event: NormalizedChangeEvent) -> None: ...
