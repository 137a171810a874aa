"""Registro de métricas via structured logging.

As métricas são linhas de log estruturadas, agregáveis depois por
qualquer sistema de logs (Cloud Logging, Loki, CloudWatch Insights).

Métricas suportadas:
- metric_latency: tempo de processamento por componente/operação
- metric_reconnect: reconexões agendadas da assinatura, com motivo
- metric_webhook_delivery: resultado de cada entrega ao webhook
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "subscription_manager")
        operation: Nome da operação (ex: "process_event")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    extra: dict[str, object] = {
        "metric_type": "latency",
        "component": component,
        "operation": operation,
        "latency_ms": round(latency_ms, 2),
    }
    if correlation_id:
        extra["correlation_id"] = correlation_id
    logger.info("metric_latency", extra=extra)


def record_reconnect(
    channel: str,
    reason: str,
    attempt: int,
    delay_seconds: float,
) -> None:
    """Registra uma reconexão agendada.

    Args:
        channel: Canal CDC assinado
        reason: Motivo (ex: "auth_failure", "subscribe_rejected")
        attempt: Número da tentativa desde o startup
        delay_seconds: Espera antes do novo login
    """
    logger.info(
        "metric_reconnect",
        extra={
            "metric_type": "reconnect",
            "component": "subscription_manager",
            "channel": channel,
            "reason": reason,
            "attempt": attempt,
            "delay_seconds": delay_seconds,
        },
    )


def record_webhook_delivery(
    success: bool,
    latency_ms: float,
    status_code: int | None = None,
) -> None:
    """Registra o resultado de uma entrega ao webhook."""
    logger.info(
        "metric_webhook_delivery",
        extra={
            "metric_type": "webhook_delivery",
            "component": "webhook_forwarder",
            "success": success,
            "status_code": status_code,
            "latency_ms": round(latency_ms, 2),
        },
    )
