"""Protocolo de normalização de eventos CDC."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .models import NormalizedChangeEvent


class ChangeEventNormalizerProtocol(Protocol):
    """Função pura: evento bruto → evento normalizado. Nunca levanta."""

    def __call__(self, raw: Mapping[str, Any]) -> NormalizedChangeEvent: ...
