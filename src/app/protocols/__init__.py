"""Protocolos e contratos do core da aplicação."""

from .event_store import EventStoreProtocol, EventStoreReaderProtocol
from .models import (
    HEADER_KEY,
    NormalizedChangeEvent,
    RawChangeEvent,
)
from .normalizer import ChangeEventNormalizerProtocol
from .streaming import (
    ChangeEventStreamProtocol,
    StreamingSession,
    StreamingTransportProtocol,
)
from .webhook import EventForwarderProtocol, WebhookHttpClientProtocol

__all__ = [
    "HEADER_KEY",
    "ChangeEventNormalizerProtocol",
    "ChangeEventStreamProtocol",
    "EventForwarderProtocol",
    "EventStoreProtocol",
    "EventStoreReaderProtocol",
    "NormalizedChangeEvent",
    "RawChangeEvent",
    "StreamingSession",
    "StreamingTransportProtocol",
    "WebhookHttpClientProtocol",
]
