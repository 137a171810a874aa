"""Observabilidade — correlation_id e métricas via log estruturado.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
    from app.observability import record_latency, record_reconnect
"""

from app.observability.correlation import (
    correlation_id_for_event,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_latency,
    record_reconnect,
    record_webhook_delivery,
)

__all__ = [
    "correlation_id_for_event",
    "generate_correlation_id",
    "get_correlation_id",
    "record_latency",
    "record_reconnect",
    "record_webhook_delivery",
    "reset_correlation_id",
    "set_correlation_id",
]
