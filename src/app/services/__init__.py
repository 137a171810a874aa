"""Serviços de aplicação do pipeline CDC."""

from app.services.webhook_forwarder import WebhookForwarder

__all__ = [
    "WebhookForwarder",
]
