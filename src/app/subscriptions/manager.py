"""SubscriptionManager — ciclo de vida da assinatura CDC.

Dono da sessão autenticada e da assinatura com replay. Para cada evento
bruto: normaliza → grava o cursor → buffer → webhook (desacoplado).

Política de falhas:
- Login inicial falho: fatal (start() levanta AuthenticationError).
- Sessão invalidada, erro inesperado no stream, subscribe rejeitado ou
  login falho durante reconexão: espera fixa e refaz tudo,
  indefinidamente, retomando do último replay id processado.
- Evento malformado ou falha no webhook: logado, o loop segue.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import TYPE_CHECKING, Any

from api.normalizers.salesforce_cdc import normalize_change_event
from app.observability import (
    correlation_id_for_event,
    record_latency,
    record_reconnect,
    reset_correlation_id,
    set_correlation_id,
)
from config.settings import REPLAY_NEWEST
from fsm import SubscriptionState, SubscriptionStateMachine
from utils.errors import AuthenticationError, InfrastructureError, StreamingAuthError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.protocols.event_store import EventStoreProtocol
    from app.protocols.models import NormalizedChangeEvent, RawChangeEvent
    from app.protocols.normalizer import ChangeEventNormalizerProtocol
    from app.protocols.streaming import (
        ChangeEventStreamProtocol,
        StreamingSession,
        StreamingTransportProtocol,
    )
    from app.protocols.webhook import EventForwarderProtocol

logger = logging.getLogger(__name__)

DEFAULT_RECONNECT_DELAY_SECONDS = 5.0


class SubscriptionManager:
    """Orquestra login, assinatura, reconexão e processamento de eventos.

    Args:
        transport: Capacidade de entrada (login + subscribe com replay).
        store: Buffer de eventos recentes (único escritor: este manager).
        forwarder: Entrega best-effort ao webhook.
        channel: Canal CDC (ex: /data/ContactChangeEvent).
        replay_id: Cursor inicial (-1 = apenas eventos novos).
        reconnect_delay_seconds: Espera fixa antes de cada reconexão.
        normalizer: Função pura raw → NormalizedChangeEvent.
        sleep: Timer não bloqueante (injetável em testes).
    """

    def __init__(
        self,
        transport: StreamingTransportProtocol,
        store: EventStoreProtocol,
        forwarder: EventForwarderProtocol,
        *,
        channel: str,
        replay_id: Any = REPLAY_NEWEST,
        reconnect_delay_seconds: float = DEFAULT_RECONNECT_DELAY_SECONDS,
        normalizer: ChangeEventNormalizerProtocol = normalize_change_event,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._transport = transport
        self._store = store
        self._forwarder = forwarder
        self._channel = channel
        self._last_replay_id = replay_id
        self._reconnect_delay_seconds = reconnect_delay_seconds
        self._normalizer = normalizer
        self._sleep = sleep
        self._machine = SubscriptionStateMachine(channel=channel)
        self._session: StreamingSession | None = None
        self._task: asyncio.Task[None] | None = None
        self._reconnect_attempts = 0
        self._events_processed = 0

    @property
    def state(self) -> SubscriptionState:
        return self._machine.current_state

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def last_replay_id(self) -> Any:
        """Cursor de retomada: último replay id processado (ou o inicial)."""
        return self._last_replay_id

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    @property
    def events_processed(self) -> int:
        return self._events_processed

    @property
    def state_machine(self) -> SubscriptionStateMachine:
        return self._machine

    def status(self) -> dict[str, Any]:
        """Resumo para a rota /events/status (sem credenciais)."""
        return {
            "state": self.state.name,
            "channel": self._channel,
            "last_replay_id": self._last_replay_id,
            "reconnect_attempts": self._reconnect_attempts,
            "events_processed": self._events_processed,
            "instance_url": self._session.instance_url if self._session else None,
        }

    async def start(self) -> None:
        """Faz o login inicial e agenda o loop da assinatura.

        Raises:
            AuthenticationError: login inicial falhou (estado FAILED).
        """
        if self._task is not None:
            raise RuntimeError("SubscriptionManager já iniciado")

        self._transition(SubscriptionState.AUTHENTICATING, "start")
        logger.info("salesforce_login_started", extra={"channel": self._channel})
        try:
            session = await self._transport.authenticate()
        except AuthenticationError as exc:
            self._transition(
                SubscriptionState.FAILED,
                "initial_login_failed",
                {"error_type": type(exc).__name__},
            )
            logger.error(
                "salesforce_login_failed",
                extra={"channel": self._channel, "reason": str(exc), "fatal": True},
            )
            raise

        self._session = session
        self._task = asyncio.create_task(self._run(session), name="cdc-subscription")
        self._task.add_done_callback(self._on_loop_done)

    async def stop(self) -> None:
        """Shutdown limpo: cancela o loop e fecha o stream em andamento."""
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if not self._machine.is_terminal:
            self._transition(SubscriptionState.STOPPED, "shutdown")
            logger.info(
                "subscription_stopped",
                extra={"channel": self._channel, "last_replay_id": self._last_replay_id},
            )

    async def _run(self, session: StreamingSession) -> None:
        current: StreamingSession | None = session
        while True:
            reason = "login_failed"
            if current is not None:
                reason = await self._subscribe_and_consume(current)
            await self._wait_before_reconnect(reason)
            current = await self._reauthenticate()

    async def _subscribe_and_consume(self, session: StreamingSession) -> str:
        """Assina e consome até o stream falhar; retorna o motivo da saída.

        Qualquer exceção que não seja cancelamento vira motivo de reconexão:
        o loop nunca morre deixando o estado em SUBSCRIBING/ACTIVE.
        """
        self._transition(SubscriptionState.SUBSCRIBING, "login_ok")
        logger.info(
            "subscription_requested",
            extra={"channel": self._channel, "replay_id": self._last_replay_id},
        )
        try:
            stream = await self._transport.subscribe(
                session, self._channel, self._last_replay_id
            )
        except InfrastructureError as exc:
            logger.error(
                "subscription_rejected",
                extra={
                    "channel": self._channel,
                    "error_type": type(exc).__name__,
                    "reason": str(exc),
                },
            )
            return "subscribe_rejected"
        except Exception:
            logger.exception("subscription_unexpected_error", extra={"channel": self._channel})
            return "unexpected_error"

        self._transition(SubscriptionState.ACTIVE, "subscribe_ack")
        logger.info(
            "subscription_active",
            extra={"channel": self._channel, "replay_id": self._last_replay_id},
        )
        try:
            async for raw in stream:
                self._process_raw_event(raw)
        except StreamingAuthError as exc:
            logger.error(
                "streaming_auth_failure",
                extra={"channel": self._channel, "reason": str(exc)},
            )
            return "auth_failure"
        except InfrastructureError as exc:
            logger.error(
                "streaming_failed",
                extra={
                    "channel": self._channel,
                    "error_type": type(exc).__name__,
                    "reason": str(exc),
                },
            )
            return "stream_failed"
        except Exception:
            logger.exception("streaming_unexpected_error", extra={"channel": self._channel})
            return "unexpected_error"
        finally:
            await self._close_stream(stream)
        return "stream_ended"

    async def _close_stream(self, stream: ChangeEventStreamProtocol) -> None:
        try:
            await stream.aclose()
        except Exception:
            logger.exception("stream_close_failed", extra={"channel": self._channel})

    async def _wait_before_reconnect(self, reason: str) -> None:
        self._transition(SubscriptionState.RECONNECTING, reason)
        self._reconnect_attempts += 1
        logger.warning(
            "subscription_reconnect_scheduled",
            extra={
                "channel": self._channel,
                "reason": reason,
                "attempt": self._reconnect_attempts,
                "delay_seconds": self._reconnect_delay_seconds,
                "replay_id": self._last_replay_id,
            },
        )
        record_reconnect(
            self._channel, reason, self._reconnect_attempts, self._reconnect_delay_seconds
        )
        await self._sleep(self._reconnect_delay_seconds)

    async def _reauthenticate(self) -> StreamingSession | None:
        """Novo login após o delay; falha aqui não é fatal."""
        self._transition(SubscriptionState.AUTHENTICATING, "reconnect_timer")
        try:
            session = await self._transport.authenticate()
        except AuthenticationError as exc:
            logger.error(
                "salesforce_relogin_failed",
                extra={"channel": self._channel, "reason": str(exc), "fatal": False},
            )
            return None
        except Exception:
            logger.exception(
                "salesforce_relogin_unexpected_error", extra={"channel": self._channel}
            )
            return None
        self._session = session
        return session

    def _process_raw_event(self, raw: RawChangeEvent) -> None:
        started_at = time.perf_counter()
        try:
            event = self._normalizer(raw)
        except Exception:
            logger.exception("cdc_event_normalization_failed", extra={"channel": self._channel})
            return

        correlation_id = correlation_id_for_event(event.replay_id)
        token = set_correlation_id(correlation_id)
        try:
            self._handle_event(event)
            record_latency(
                "subscription_manager",
                "process_event",
                (time.perf_counter() - started_at) * 1000,
                correlation_id,
            )
        except Exception:
            logger.exception(
                "cdc_event_processing_failed",
                extra={"channel": self._channel, "replay_id": event.replay_id},
            )
        finally:
            reset_correlation_id(token)

    def _handle_event(self, event: NormalizedChangeEvent) -> None:
        # Cursor gravado antes do webhook: falha na entrega não perde a retomada
        if event.replay_id is not None:
            self._last_replay_id = event.replay_id
        self._store.append(event)
        self._events_processed += 1
        logger.info("cdc_event_received", extra=event.to_log_dict())
        self._forwarder.deliver(event)

    def _transition(
        self,
        target: SubscriptionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        result = self._machine.transition(target, trigger, metadata)
        if not result.success or result.transition is None:
            raise RuntimeError(result.error_reason)
        logger.debug("subscription_state_changed", extra=result.transition.to_log_dict())

    def _on_loop_done(self, task: asyncio.Task[None]) -> None:
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "subscription_loop_crashed",
                    extra={
                        "channel": self._channel,
                        "error_type": type(exc).__name__,
                        "state": self.state.name,
                    },
                )
