"""Settings do pipeline de ingestão (buffer de eventos e reconexão)."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from config.settings.base.env import env_float, env_int

DEFAULT_MAX_EVENTS = 100
DEFAULT_RECONNECT_DELAY_SECONDS = 5.0


@dataclass(frozen=True)
class PipelineSettings:
    """Configurações do pipeline.

    Attributes:
        max_events: Capacidade do buffer em memória (fixa no startup)
        reconnect_delay_seconds: Espera fixa antes de cada reconexão
    """

    max_events: int = DEFAULT_MAX_EVENTS
    reconnect_delay_seconds: float = DEFAULT_RECONNECT_DELAY_SECONDS

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.max_events < 1:
            errors.append("MAX_EVENTS deve ser >= 1")
        if self.reconnect_delay_seconds < 0:
            errors.append("RECONNECT_DELAY_SECONDS deve ser >= 0")
        return errors


def _load_pipeline_from_env() -> PipelineSettings:
    """Carrega PipelineSettings de variáveis de ambiente."""
    return PipelineSettings(
        max_events=env_int("MAX_EVENTS", DEFAULT_MAX_EVENTS),
        reconnect_delay_seconds=env_float(
            "RECONNECT_DELAY_SECONDS", DEFAULT_RECONNECT_DELAY_SECONDS
        ),
    )


@lru_cache(maxsize=1)
def get_pipeline_settings() -> PipelineSettings:
    """Retorna instância cacheada de PipelineSettings."""
    return _load_pipeline_from_env()
