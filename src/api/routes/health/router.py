"""Endpoints de health check (liveness e readiness)."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fsm import SubscriptionState

router = APIRouter()

SERVICE_NAME = "cdc-relay"


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe — o processo está respondendo."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: pronto apenas com a assinatura ACTIVE.

    Durante uma reconexão responde 503; o buffer continua legível em
    /events mesmo assim.
    """
    manager: Any = getattr(request.app.state, "subscription_manager", None)
    state = manager.state if manager is not None else None
    ready = state == SubscriptionState.ACTIVE

    payload = {
        "status": "ready" if ready else "not_ready",
        "subscription_state": state.name if state is not None else "not_configured",
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)
