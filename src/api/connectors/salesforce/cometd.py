"""Cliente CometD/Bayeux (long-polling) para a Salesforce Streaming API.

Fluxo: handshake → subscribe (com extensão de replay) → connect em loop.
Cada /meta/connect devolve zero ou mais mensagens de dados do canal.

Sinais de sessão inválida (erro 401::, advice reconnect=none|handshake)
viram StreamingAuthError; falhas de rede viram StreamingTransportError.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
from typing import TYPE_CHECKING, Any

import httpx

from utils.errors import (
    InfrastructureError,
    StreamingAuthError,
    StreamingTransportError,
    SubscriptionError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

logger = logging.getLogger(__name__)

BAYEUX_VERSION = "1.0"
META_HANDSHAKE = "/meta/handshake"
META_SUBSCRIBE = "/meta/subscribe"
META_CONNECT = "/meta/connect"
META_DISCONNECT = "/meta/disconnect"

DEFAULT_RETRY_INTERVAL_SECONDS = 1.0
# A Salesforce anuncia interval=0; sem piso, rede fora vira loop quente
MIN_RETRY_INTERVAL_SECONDS = 1.0
MAX_CONSECUTIVE_CONNECT_FAILURES = 5


def cometd_endpoint(instance_url: str, api_version: str) -> str:
    return f"{instance_url.rstrip('/')}/cometd/{api_version}"


def is_auth_failure(message: dict[str, Any]) -> bool:
    """Indica se uma resposta /meta/* sinaliza sessão inválida.

    Cobre o erro 401 no campo `error`, o failureReason da extensão sfdc e
    o advice que proíbe reconectar no mesmo client (none/handshake).
    """
    if message.get("successful", False):
        return False
    error = str(message.get("error") or "")
    ext = message.get("ext") or {}
    sfdc = ext.get("sfdc") if isinstance(ext, dict) else None
    failure_reason = str((sfdc or {}).get("failureReason") or "")
    advice = message.get("advice") or {}
    reconnect = advice.get("reconnect") if isinstance(advice, dict) else None
    return (
        error.startswith("401")
        or failure_reason.startswith("401")
        or reconnect in ("none", "handshake")
    )


class CometdClient:
    """Cliente Bayeux mínimo sobre httpx.

    O httpx.AsyncClient recebido deve carregar o header Authorization e
    manter cookies (o balanceador da Salesforce usa BAYEUX_BROWSER).
    """

    def __init__(self, http_client: httpx.AsyncClient, endpoint: str) -> None:
        self._http = http_client
        self._endpoint = endpoint
        self._client_id: str | None = None
        self._message_ids = itertools.count(1)
        self._retry_interval_seconds = DEFAULT_RETRY_INTERVAL_SECONDS

    @property
    def client_id(self) -> str | None:
        return self._client_id

    @property
    def retry_interval_seconds(self) -> float:
        """Intervalo aconselhado pelo servidor antes de um novo connect."""
        return self._retry_interval_seconds

    async def _send(self, messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
        for message in messages:
            message["id"] = str(next(self._message_ids))
            if self._client_id and message["channel"] != META_HANDSHAKE:
                message["clientId"] = self._client_id
        try:
            response = await self._http.post(self._endpoint, json=messages)
        except httpx.HTTPError as exc:
            raise StreamingTransportError(f"cometd_request_failed: {type(exc).__name__}") from exc

        if response.status_code in (401, 403):
            raise StreamingAuthError(f"cometd_http_{response.status_code}")
        if not response.is_success:
            raise StreamingTransportError(f"cometd_http_{response.status_code}")
        try:
            replies = response.json()
        except ValueError as exc:
            raise StreamingTransportError("cometd_invalid_json") from exc
        if not isinstance(replies, list):
            raise StreamingTransportError("cometd_unexpected_reply")
        return [reply for reply in replies if isinstance(reply, dict)]

    @staticmethod
    def _meta_reply(replies: list[dict[str, Any]], channel: str) -> dict[str, Any]:
        for reply in replies:
            if reply.get("channel") == channel:
                return reply
        raise StreamingTransportError(f"cometd_missing_reply: {channel}")

    def _apply_advice(self, reply: dict[str, Any]) -> None:
        advice = reply.get("advice")
        if isinstance(advice, dict) and isinstance(advice.get("interval"), (int, float)):
            self._retry_interval_seconds = max(advice["interval"] / 1000, 0.0)

    async def handshake(self) -> str:
        """Abre o client Bayeux com suporte a replay; retorna o clientId."""
        replies = await self._send([{
            "channel": META_HANDSHAKE,
            "version": BAYEUX_VERSION,
            "minimumVersion": BAYEUX_VERSION,
            "supportedConnectionTypes": ["long-polling"],
            "ext": {"replay": True},
        }])
        reply = self._meta_reply(replies, META_HANDSHAKE)
        if not reply.get("successful"):
            error = str(reply.get("error") or "handshake_rejected")
            if is_auth_failure(reply):
                raise StreamingAuthError(error)
            raise SubscriptionError(error)
        client_id = reply.get("clientId")
        if not client_id:
            raise SubscriptionError("handshake_missing_client_id")
        self._client_id = str(client_id)
        self._apply_advice(reply)
        return self._client_id

    async def subscribe(self, channel: str, replay_id: Any) -> None:
        """Assina o canal a partir do replay id informado.

        Raises:
            SubscriptionError: canal inexistente, replay id fora da retenção, etc.
            StreamingAuthError: sessão inválida.
        """
        replies = await self._send([{
            "channel": META_SUBSCRIBE,
            "subscription": channel,
            "ext": {"replay": {channel: replay_id}},
        }])
        reply = self._meta_reply(replies, META_SUBSCRIBE)
        if not reply.get("successful"):
            error = str(reply.get("error") or "subscribe_rejected")
            if is_auth_failure(reply):
                raise StreamingAuthError(error)
            raise SubscriptionError(error)

    async def connect(self) -> list[dict[str, Any]]:
        """Executa um long-poll; retorna as mensagens de dados recebidas."""
        replies = await self._send([{
            "channel": META_CONNECT,
            "connectionType": "long-polling",
        }])
        data_messages: list[dict[str, Any]] = []
        for reply in replies:
            channel = str(reply.get("channel") or "")
            if channel == META_CONNECT:
                self._apply_advice(reply)
                if not reply.get("successful", False):
                    if is_auth_failure(reply):
                        raise StreamingAuthError(str(reply.get("error") or "connect_rejected"))
                    raise StreamingTransportError(str(reply.get("error") or "connect_failed"))
            elif not channel.startswith("/meta/"):
                data_messages.append(reply)
        return data_messages

    async def disconnect(self) -> None:
        if self._client_id is None:
            return
        await self._send([{"channel": META_DISCONNECT}])
        self._client_id = None


class CometdChangeEventStream:
    """Stream de change events de uma assinatura já confirmada.

    Falhas de rede no long-poll são repetidas após o intervalo aconselhado
    (nunca abaixo de `min_retry_interval_seconds`). Após
    `max_consecutive_failures` falhas seguidas o StreamingTransportError
    sobe, e o SubscriptionManager faz a reconexão completa com delay fixo.
    StreamingAuthError encerra a iteração na hora.
    """

    def __init__(
        self,
        client: CometdClient,
        http_client: httpx.AsyncClient,
        channel: str,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        min_retry_interval_seconds: float = MIN_RETRY_INTERVAL_SECONDS,
        max_consecutive_failures: int = MAX_CONSECUTIVE_CONNECT_FAILURES,
    ) -> None:
        self._client = client
        self._http = http_client
        self._channel = channel
        self._sleep = sleep
        self._min_retry_interval_seconds = min_retry_interval_seconds
        self._max_consecutive_failures = max_consecutive_failures
        self._closed = False

    @property
    def channel(self) -> str:
        return self._channel

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()

    def _retry_delay(self) -> float:
        return max(self._client.retry_interval_seconds, self._min_retry_interval_seconds)

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        failures = 0
        while not self._closed:
            try:
                messages = await self._client.connect()
            except StreamingTransportError as exc:
                failures += 1
                if failures >= self._max_consecutive_failures:
                    logger.error(
                        "cometd_connect_gave_up",
                        extra={
                            "channel": self._channel,
                            "reason": str(exc),
                            "consecutive_failures": failures,
                        },
                    )
                    raise
                delay = self._retry_delay()
                logger.warning(
                    "cometd_connect_retry",
                    extra={
                        "channel": self._channel,
                        "reason": str(exc),
                        "attempt": failures,
                        "retry_in_seconds": delay,
                    },
                )
                await self._sleep(delay)
                continue
            failures = 0
            for message in messages:
                if message.get("channel") != self._channel:
                    continue
                data = message.get("data")
                if isinstance(data, dict):
                    yield data

    async def aclose(self) -> None:
        """Encerra o client Bayeux e libera a conexão HTTP."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._client.disconnect()
        except InfrastructureError as exc:
            logger.debug(
                "cometd_disconnect_failed",
                extra={"channel": self._channel, "error_type": type(exc).__name__},
            )
        finally:
            with contextlib.suppress(httpx.HTTPError):
                await self._http.aclose()
