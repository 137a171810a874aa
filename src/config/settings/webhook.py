"""Settings do encaminhamento opcional para webhook.

Sem WEBHOOK_URL o encaminhamento fica desligado silenciosamente.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from config.settings.base.env import env_float, env_int


@dataclass(frozen=True)
class WebhookSettings:
    """Configurações do webhook de saída.

    Attributes:
        url: Destino do POST JSON ("" desliga o encaminhamento)
        timeout_seconds: Timeout de cada entrega
        max_concurrency: Limite de entregas simultâneas em background
    """

    url: str = ""
    timeout_seconds: float = 10.0
    max_concurrency: int = 100

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.url and not self.url.startswith(("https://", "http://")):
            errors.append(f"WEBHOOK_URL inválido: {self.url}")
        if self.timeout_seconds <= 0:
            errors.append("WEBHOOK_TIMEOUT_SECONDS deve ser > 0")
        if self.max_concurrency < 1:
            errors.append("WEBHOOK_MAX_CONCURRENCY deve ser >= 1")
        return errors


def _load_webhook_from_env() -> WebhookSettings:
    """Carrega WebhookSettings de variáveis de ambiente."""
    return WebhookSettings(
        url=os.getenv("WEBHOOK_URL", "").strip(),
        timeout_seconds=env_float("WEBHOOK_TIMEOUT_SECONDS", 10.0),
        max_concurrency=env_int("WEBHOOK_MAX_CONCURRENCY", 100),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_webhook_from_env()
