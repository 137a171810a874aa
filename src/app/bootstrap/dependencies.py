"""Factories do pipeline CDC — criação das implementações concretas.

Cada factory aceita settings explícitas (testes) ou lê as cacheadas do
ambiente. create_pipeline() monta tudo e devolve o container que o
lifespan da aplicação guarda em app.state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from api.connectors.http_base import HttpClient, HttpClientConfig
from api.connectors.salesforce import SalesforceStreamingTransport
from app.infra.stores import MemoryEventStore
from app.infra.tasks import BackgroundTaskRunner
from app.services import WebhookForwarder
from app.subscriptions import SubscriptionManager
from config.settings import (
    get_pipeline_settings,
    get_salesforce_settings,
    get_webhook_settings,
)

if TYPE_CHECKING:
    import httpx

    from app.protocols.streaming import StreamingTransportProtocol
    from config.settings import PipelineSettings, SalesforceSettings, WebhookSettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Componentes
# ──────────────────────────────────────────────────────────────────────────────


def create_event_store(settings: PipelineSettings | None = None) -> MemoryEventStore:
    """Cria o buffer de eventos com capacidade fixa (MAX_EVENTS)."""
    settings = settings or get_pipeline_settings()
    store = MemoryEventStore(max_events=settings.max_events)
    logger.info("event_store_created", extra={"capacity": store.capacity})
    return store


def create_webhook_forwarder(settings: WebhookSettings | None = None) -> WebhookForwarder:
    """Cria o forwarder; sem WEBHOOK_URL ele vira no-op."""
    settings = settings or get_webhook_settings()
    http_client = HttpClient(
        HttpClientConfig(
            timeout_seconds=settings.timeout_seconds,
            default_headers={"Content-Type": "application/json"},
        )
    )
    forwarder = WebhookForwarder(
        url=settings.url,
        http_client=http_client,
        task_runner=BackgroundTaskRunner(
            max_concurrency=settings.max_concurrency,
            component="webhook_forwarder",
        ),
    )
    logger.info("webhook_forwarder_created", extra={"enabled": forwarder.enabled})
    return forwarder


def create_streaming_transport(
    settings: SalesforceSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SalesforceStreamingTransport:
    """Cria o transporte Salesforce (login SOAP + CometD)."""
    return SalesforceStreamingTransport(settings or get_salesforce_settings(), transport)


def create_subscription_manager(
    transport: StreamingTransportProtocol,
    store: MemoryEventStore,
    forwarder: WebhookForwarder,
    salesforce_settings: SalesforceSettings | None = None,
    pipeline_settings: PipelineSettings | None = None,
) -> SubscriptionManager:
    """Cria o SubscriptionManager com canal e replay id configurados."""
    salesforce_settings = salesforce_settings or get_salesforce_settings()
    pipeline_settings = pipeline_settings or get_pipeline_settings()
    return SubscriptionManager(
        transport,
        store,
        forwarder,
        channel=salesforce_settings.cdc_channel,
        replay_id=salesforce_settings.replay_id,
        reconnect_delay_seconds=pipeline_settings.reconnect_delay_seconds,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Pipeline completo
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Pipeline:
    """Componentes montados do pipeline (guardados em app.state)."""

    event_store: MemoryEventStore
    forwarder: WebhookForwarder
    subscription_manager: SubscriptionManager


def create_pipeline(transport: StreamingTransportProtocol | None = None) -> Pipeline:
    """Monta store, forwarder, transporte e manager a partir do ambiente."""
    store = create_event_store()
    forwarder = create_webhook_forwarder()
    manager = create_subscription_manager(
        transport or create_streaming_transport(),
        store,
        forwarder,
    )
    return Pipeline(event_store=store, forwarder=forwarder, subscription_manager=manager)
