"""Settings da Salesforce (login SOAP e Streaming API/CometD).

Credenciais ausentes são fatais: o processo não sobe sem SF_USERNAME
e SF_PASSWORD.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from config.settings.base.env import env_float, env_int

DEFAULT_LOGIN_URL = "https://login.salesforce.com"
DEFAULT_API_VERSION = "59.0"
DEFAULT_CDC_CHANNEL = "/data/ContactChangeEvent"

# -1 = somente eventos novos; -2 = todos os eventos retidos (72h)
REPLAY_NEWEST = -1
REPLAY_ALL_RETAINED = -2


@dataclass(frozen=True)
class SalesforceSettings:
    """Configurações de conexão Salesforce.

    Attributes:
        username: Usuário da integração
        password: Senha (sem o security token)
        security_token: Token concatenado à senha no login SOAP
        login_url: Endpoint de login (produção ou test.salesforce.com)
        api_version: Versão da API usada em SOAP e CometD
        cdc_channel: Canal CDC (ex: /data/ContactChangeEvent)
        replay_id: Replay id inicial (-1 = mais recente)
        streaming_timeout_seconds: Timeout de leitura do long-polling
    """

    username: str = ""
    password: str = field(default="", repr=False)
    security_token: str = field(default="", repr=False)
    login_url: str = DEFAULT_LOGIN_URL
    api_version: str = DEFAULT_API_VERSION
    cdc_channel: str = DEFAULT_CDC_CHANNEL
    replay_id: int = REPLAY_NEWEST
    streaming_timeout_seconds: float = 120.0

    @property
    def login_password(self) -> str:
        """Senha no formato exigido pelo login SOAP (senha + token)."""
        return f"{self.password}{self.security_token}"

    def validate(self) -> list[str]:
        """Valida configurações Salesforce.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not self.username:
            errors.append("SF_USERNAME não configurado")
        if not self.password:
            errors.append("SF_PASSWORD não configurado")
        if not self.login_url.startswith(("https://", "http://")):
            errors.append(f"SF_LOGIN_URL inválido: {self.login_url}")
        if not self.cdc_channel.startswith("/"):
            errors.append(f"CDC_CHANNEL deve começar com '/': {self.cdc_channel}")
        if self.replay_id < REPLAY_ALL_RETAINED:
            errors.append(f"REPLAY_ID inválido: {self.replay_id}")
        if self.streaming_timeout_seconds <= 0:
            errors.append("STREAMING_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_salesforce_from_env() -> SalesforceSettings:
    """Carrega SalesforceSettings de variáveis de ambiente."""
    return SalesforceSettings(
        username=os.getenv("SF_USERNAME", ""),
        password=os.getenv("SF_PASSWORD", ""),
        security_token=os.getenv("SF_SECURITY_TOKEN", ""),
        login_url=os.getenv("SF_LOGIN_URL", DEFAULT_LOGIN_URL).rstrip("/"),
        api_version=os.getenv("SF_API_VERSION", DEFAULT_API_VERSION),
        cdc_channel=os.getenv("CDC_CHANNEL", DEFAULT_CDC_CHANNEL),
        replay_id=env_int("REPLAY_ID", REPLAY_NEWEST),
        streaming_timeout_seconds=env_float("STREAMING_TIMEOUT_SECONDS", 120.0),
    )


@lru_cache(maxsize=1)
def get_salesforce_settings() -> SalesforceSettings:
    """Retorna instância cacheada de SalesforceSettings."""
    return _load_salesforce_from_env()
