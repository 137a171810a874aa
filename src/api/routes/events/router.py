"""Superfície de leitura dos eventos CDC recentes.

Somente leitura: o buffer é acessado pelo handle guardado em
app.state.event_store pelo lifespan, nunca por estado global de módulo.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

router = APIRouter()


class EventsResponse(BaseModel):
    """Snapshot do buffer, mais recente primeiro."""

    count: int
    capacity: int
    events: list[dict[str, Any]]


class SubscriptionStatusResponse(BaseModel):
    """Estado da assinatura e do buffer."""

    state: str
    channel: str
    last_replay_id: Any = None
    reconnect_attempts: int
    events_processed: int
    instance_url: str | None = None
    stored_events: int
    store_capacity: int


def _get_state_attr(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=503, detail="pipeline_not_ready")
    return value


@router.get("", response_model=EventsResponse)
async def list_events(
    request: Request,
    limit: int | None = Query(default=None, ge=1),
    entity: str | None = Query(default=None),
) -> EventsResponse:
    """Lista os eventos em memória (newest-first, até MAX_EVENTS)."""
    store = _get_state_attr(request, "event_store")
    events = store.snapshot()
    if entity:
        events = tuple(event for event in events if event.entity_name == entity)
    if limit is not None:
        events = events[:limit]
    return EventsResponse(
        count=len(events),
        capacity=store.capacity,
        events=[event.to_dict() for event in events],
    )


@router.get("/status", response_model=SubscriptionStatusResponse)
async def subscription_status(request: Request) -> SubscriptionStatusResponse:
    """Estado atual da assinatura (para operação/diagnóstico)."""
    manager = _get_state_attr(request, "subscription_manager")
    store = _get_state_attr(request, "event_store")
    return SubscriptionStatusResponse(
        **manager.status(),
        stored_events=len(store),
        store_capacity=store.capacity,
    )
