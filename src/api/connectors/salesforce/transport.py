"""Transporte Salesforce: login SOAP + assinatura CometD com replay.

Implementa StreamingTransportProtocol. Cada subscribe abre um
httpx.AsyncClient próprio (cookies e Authorization da sessão); o stream
retornado é dono desse client e o fecha em aclose().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from app.protocols.streaming import StreamingSession

from .auth import soap_login
from .cometd import CometdChangeEventStream, CometdClient, cometd_endpoint

if TYPE_CHECKING:
    from config.settings import SalesforceSettings

logger = logging.getLogger(__name__)

LOGIN_TIMEOUT_SECONDS = 30.0
CONNECT_TIMEOUT_SECONDS = 10.0


class SalesforceStreamingTransport:
    """Capacidade de entrada do pipeline sobre a Salesforce Streaming API.

    Args:
        settings: Credenciais, login URL, versão da API e timeouts.
        transport: Transport httpx opcional (testes usam httpx.MockTransport).
    """

    def __init__(
        self,
        settings: SalesforceSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def authenticate(self) -> StreamingSession:
        async with httpx.AsyncClient(
            timeout=LOGIN_TIMEOUT_SECONDS,
            transport=self._transport,
        ) as client:
            return await soap_login(
                client,
                login_url=self._settings.login_url,
                username=self._settings.username,
                password=self._settings.login_password,
                api_version=self._settings.api_version,
            )

    async def subscribe(
        self,
        session: StreamingSession,
        channel: str,
        replay_id: Any,
    ) -> CometdChangeEventStream:
        http_client = httpx.AsyncClient(
            headers={"Authorization": f"Bearer {session.session_id}"},
            timeout=httpx.Timeout(
                CONNECT_TIMEOUT_SECONDS,
                read=self._settings.streaming_timeout_seconds,
            ),
            transport=self._transport,
        )
        client = CometdClient(
            http_client,
            cometd_endpoint(session.instance_url, self._settings.api_version),
        )
        try:
            await client.handshake()
            await client.subscribe(channel, replay_id)
        except BaseException:
            await http_client.aclose()
            raise

        logger.info(
            "cometd_subscribed",
            extra={"channel": channel, "replay_id": replay_id},
        )
        return CometdChangeEventStream(client, http_client, channel)
