"""Logging estruturado JSON do cdc_relay.

Uso:
    from config.logging import configure_logging, get_logger

    # Uma vez, no bootstrap
    configure_logging(level="INFO", service_name="cdc_relay")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("cdc_event_received", extra={"replay_id": 42})

Todo registro carrega: asctime, level, logger, message,
correlation_id e service. Valores de campos alterados nunca vão para log.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
]
