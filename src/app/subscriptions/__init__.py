"""Gerenciamento da assinatura CDC (login, replay, reconexão)."""

from app.subscriptions.manager import DEFAULT_RECONNECT_DELAY_SECONDS, SubscriptionManager

__all__ = [
    "DEFAULT_RECONNECT_DELAY_SECONDS",
    "SubscriptionManager",
]
