"""Protocolos da saída para webhook."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    import httpx

    from .models import NormalizedChangeEvent


class WebhookHttpClientProtocol(Protocol):
    """Contrato mínimo para o cliente HTTP de saída."""

    async def post(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response: ...


class EventForwarderProtocol(Protocol):
    """Entrega best-effort; deliver() retorna sem aguardar o envio."""

    def deliver(self, event: NormalizedChangeEvent) -> None: ...
