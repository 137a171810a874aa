"""Fakes in-memory da Salesforce Streaming API para testes deterministas."""

from __future__ import annotations

import asyncio
from typing import Any

from app.protocols.streaming import StreamingSession

CHANNEL = "/data/ContactChangeEvent"

SESSION = StreamingSession(
    session_id="00Dxx0000000001!AQ4AQFake",
    instance_url="https://example.my.salesforce.com",
    user_id="005xx0000012345",
    organization_id="00Dxx0000000001",
)


def make_raw_event(
    replay_id: Any = 42,
    *,
    entity_name: str = "Contact",
    change_type: str = "UPDATE",
    record_ids: tuple[str, ...] = ("003xx000004TmiQ",),
    changed_fields: tuple[str, ...] = ("Email",),
    values: dict[str, Any] | None = None,
    commit_timestamp: Any = 1700000000000,
) -> dict[str, Any]:
    """Monta um evento no formato entregue pelo CometD (`data` da mensagem)."""
    payload: dict[str, Any] = {
        "ChangeEventHeader": {
            "entityName": entity_name,
            "changeType": change_type,
            "recordIds": list(record_ids),
            "changedFields": list(changed_fields),
            "commitTimestamp": commit_timestamp,
            "commitUser": "005xx0000012345",
            "transactionKey": "0002343d-9d90-e395-ed20-cf416ba652ad",
            "changeOrigin": "com/salesforce/api/soap/59.0;client=Workbench",
            "sequenceNumber": 1,
            "commitNumber": 10960825620,
        },
    }
    payload.update(values if values is not None else {"Email": "a@b.com"})
    return {
        "schema": "IeRuaY6cbI_HsV8Rv1Mc5g",
        "payload": payload,
        "event": {"replayId": replay_id},
    }


class FakeChangeEventStream:
    """Stream roteirizado: entrega eventos, depois falha, termina ou bloqueia."""

    def __init__(
        self,
        events: list[dict[str, Any]] | None = None,
        *,
        error: BaseException | None = None,
        block: bool = False,
    ) -> None:
        self._events = list(events or [])
        self._error = error
        self._block = block
        self.on_block: asyncio.Event | None = None
        self.closed = False

    def __aiter__(self) -> Any:
        return self._iterate()

    async def _iterate(self) -> Any:
        for event in self._events:
            yield event
        if self._error is not None:
            raise self._error
        if self._block:
            if self.on_block is not None:
                self.on_block.set()
            await asyncio.Event().wait()

    async def aclose(self) -> None:
        self.closed = True


class FakeStreamingTransport:
    """Implementa StreamingTransportProtocol sem rede.

    Args:
        logins: Resultados de authenticate() em ordem (sessão ou exceção).
            Esgotada a lista, retorna SESSION.
        streams: Resultados de subscribe() em ordem (stream ou exceção).
            Esgotada a lista, retorna um stream que bloqueia e sinaliza
            `idle`, o ponto em que o teste pode inspecionar o estado.
    """

    def __init__(
        self,
        *,
        logins: list[StreamingSession | BaseException] | None = None,
        streams: list[FakeChangeEventStream | BaseException] | None = None,
    ) -> None:
        self._logins = list(logins or [])
        self._streams = list(streams or [])
        self.login_calls = 0
        self.subscribe_calls: list[tuple[str, Any]] = []
        self.opened_streams: list[FakeChangeEventStream] = []
        self.idle = asyncio.Event()

    async def authenticate(self) -> StreamingSession:
        self.login_calls += 1
        outcome = self._logins.pop(0) if self._logins else SESSION
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def subscribe(
        self,
        session: StreamingSession,
        channel: str,
        replay_id: Any,
    ) -> FakeChangeEventStream:
        self.subscribe_calls.append((channel, replay_id))
        outcome = self._streams.pop(0) if self._streams else FakeChangeEventStream(block=True)
        if isinstance(outcome, BaseException):
            raise outcome
        outcome.on_block = self.idle
        self.opened_streams.append(outcome)
        return outcome


class RecordingSleep:
    """Substitui asyncio.sleep registrando os delays, sem esperar."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class RecordingForwarder:
    """EventForwarderProtocol que apenas registra as entregas."""

    def __init__(self, *, fail_on: set[Any] | None = None) -> None:
        self.delivered: list[Any] = []
        self._fail_on = fail_on or set()

    def deliver(self, event: Any) -> None:
        if event.replay_id in self._fail_on:
            raise RuntimeError("forwarder_boom")
        self.delivered.append(event)


LOGIN_OK_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/"
    xmlns="urn:partner.soap.sforce.com">
  <soapenv:Body>
    <loginResponse>
      <result>
        <serverUrl>https://acme.my.salesforce.com/services/Soap/u/59.0/00Dxx0000000001</serverUrl>
        <sessionId>00Dxx0000000001!AQ4AQSecret</sessionId>
        <userId>005xx0000012345</userId>
        <userInfo><organizationId>00Dxx0000000001</organizationId></userInfo>
      </result>
    </loginResponse>
  </soapenv:Body>
</soapenv:Envelope>"""
