"""Entrypoint do cdc_relay.

Sobe a API de leitura (FastAPI) e, no lifespan, o pipeline CDC:
valida settings, faz o login inicial na Salesforce e inicia a assinatura.
Erro de configuração ou de login inicial aborta o startup; o uvicorn
encerra com status diferente de zero.

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    python -m app.app
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.dependencies import create_pipeline
from config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

SHUTDOWN_DRAIN_TIMEOUT_SECONDS = 10.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida do pipeline.

    Startup:
    - Valida configurações (ConfigurationError é fatal)
    - Monta store/forwarder/manager e guarda os handles em app.state
    - Login inicial (AuthenticationError é fatal) e início da assinatura

    Shutdown:
    - Para a assinatura
    - Aguarda entregas ao webhook em andamento
    """
    logger.info("app_starting", extra={"service": "cdc-relay"})
    validate_runtime_settings()

    pipeline = create_pipeline()
    app.state.event_store = pipeline.event_store
    app.state.subscription_manager = pipeline.subscription_manager

    await pipeline.subscription_manager.start()

    yield

    logger.info("app_shutting_down", extra={"service": "cdc-relay"})
    await pipeline.subscription_manager.stop()
    await pipeline.forwarder.drain(timeout_seconds=SHUTDOWN_DRAIN_TIMEOUT_SECONDS)
    await pipeline.forwarder.aclose()


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI."""
    fastapi_app = FastAPI(
        title="cdc-relay",
        description="Ingestão de Change Data Capture da Salesforce",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": "cdc-relay"})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta."""
    import uvicorn

    uvicorn.run(
        "app.app:app",
        host="0.0.0.0",
        port=8080,
    )


if __name__ == "__main__":
    main()
