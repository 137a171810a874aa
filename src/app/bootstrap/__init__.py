"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
expõe as factories do pipeline.

Uso:
    from app.bootstrap import initialize_app, validate_runtime_settings

    initialize_app()
    validate_runtime_settings()  # levanta ConfigurationError se fatal
"""

from __future__ import annotations

import logging

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_pipeline_settings,
    get_salesforce_settings,
    get_webhook_settings,
)
from utils.errors import ConfigurationError

SERVICE_NAME = "cdc_relay"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Configura logging JSON estruturado com correlation_id.

    Deve ser chamada uma vez no início do processo.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Qualquer erro de configuração é fatal, em qualquer ambiente: sem
    credenciais não há pipeline. WEBHOOK_URL ausente não é erro.

    Raises:
        ConfigurationError: lista todos os problemas encontrados.
    """
    base = get_base_settings()
    errors: list[str] = []
    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"salesforce: {error}" for error in get_salesforce_settings().validate())
    errors.extend(f"pipeline: {error}" for error in get_pipeline_settings().validate())
    errors.extend(f"webhook: {error}" for error in get_webhook_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.error(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    details = "\n".join(f"- {error}" for error in errors)
    raise ConfigurationError(f"Configuração inválida:\n{details}")
