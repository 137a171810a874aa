"""Cliente HTTP base para chamadas de saída (webhook)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 10.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


class HttpClient:
    """Cliente HTTP de tentativa única.

    Não há retry: quem chama decide o que fazer com a falha. Respostas
    não-2xx viram HttpError com status_code.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                verify=self._config.verify_ssl,
                timeout=self._config.timeout_seconds,
                headers=self._config.default_headers,
                transport=self._transport,
            )
        return self._client

    async def post(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._get_client().post(url, json=json, headers=headers)
        except httpx.TimeoutException as exc:
            raise HttpError("http_timeout", is_retryable=True) from exc
        except httpx.TransportError as exc:
            raise HttpError("http_connection_error", is_retryable=True) from exc

        if not response.is_success:
            raise HttpError(
                "http_unexpected_status",
                status_code=response.status_code,
                is_retryable=response.status_code == 429 or response.status_code >= 500,
            )
        return response

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
