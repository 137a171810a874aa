"""Encaminhamento best-effort de eventos normalizados para um webhook.

Política at-most-once: cada evento gera um único POST em background.
Falhas são logadas e descartadas (sem retry, fila ou back-pressure); o
evento continua disponível no buffer de eventos.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import httpx

from api.connectors.http_base import HttpError
from app.observability import record_webhook_delivery

if TYPE_CHECKING:
    from app.infra.tasks import BackgroundTaskRunner
    from app.protocols.models import NormalizedChangeEvent
    from app.protocols.webhook import WebhookHttpClientProtocol

logger = logging.getLogger(__name__)


class WebhookForwarder:
    """Entrega NormalizedChangeEvent.to_dict() via POST JSON.

    Args:
        url: Destino; vazio desliga o encaminhamento (deliver vira no-op).
        http_client: Cliente com `post(url, json=...)` (HttpClient).
        task_runner: Runner das tasks desacopladas.
    """

    def __init__(
        self,
        url: str,
        http_client: WebhookHttpClientProtocol,
        task_runner: BackgroundTaskRunner,
    ) -> None:
        self._url = url
        self._http_client = http_client
        self._task_runner = task_runner

    @property
    def enabled(self) -> bool:
        return bool(self._url)

    def deliver(self, event: NormalizedChangeEvent) -> None:
        """Agenda a entrega e retorna sem aguardar.

        Com o runner saturado (webhook lento), o evento não é enfileirado:
        a entrega é descartada e logada como webhook_forward_dropped.
        """
        if not self._url:
            return
        scheduled = self._task_runner.schedule(
            self._post(event),
            name=f"webhook-{event.replay_id}",
        )
        if not scheduled:
            logger.warning(
                "webhook_forward_dropped",
                extra={
                    "replay_id": event.replay_id,
                    "in_flight": self._task_runner.active_count,
                },
            )
            record_webhook_delivery(False, 0.0)

    async def _post(self, event: NormalizedChangeEvent) -> None:
        started_at = time.perf_counter()
        try:
            response = await self._http_client.post(self._url, json=event.to_dict())
        except (HttpError, httpx.HTTPError) as exc:
            latency_ms = (time.perf_counter() - started_at) * 1000
            status_code = getattr(exc, "status_code", None)
            logger.warning(
                "webhook_forward_failed",
                extra={
                    "replay_id": event.replay_id,
                    "error_type": type(exc).__name__,
                    "reason": str(exc),
                    "status_code": status_code,
                },
            )
            record_webhook_delivery(False, latency_ms, status_code=status_code)
            return

        latency_ms = (time.perf_counter() - started_at) * 1000
        logger.info(
            "webhook_forwarded",
            extra={"replay_id": event.replay_id, "status_code": response.status_code},
        )
        record_webhook_delivery(True, latency_ms, status_code=response.status_code)

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Espera entregas em andamento no shutdown (cancela as atrasadas)."""
        await self._task_runner.drain(timeout_seconds=timeout_seconds)

    async def aclose(self) -> None:
        """Fecha o cliente HTTP (chamar após drain)."""
        close = getattr(self._http_client, "aclose", None)
        if callable(close):
            await close()
