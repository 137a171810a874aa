"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    InfrastructureError,
    StreamingAuthError,
    StreamingTransportError,
    SubscriptionError,
)

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "InfrastructureError",
    "StreamingAuthError",
    "StreamingTransportError",
    "SubscriptionError",
]
