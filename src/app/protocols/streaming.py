"""Protocolos do transporte de streaming (entrada do pipeline).

O transporte concreto (login SOAP + CometD) vive em
api/connectors/salesforce; o core só conhece estes contratos.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from .models import RawChangeEvent


@dataclass(frozen=True, slots=True)
class StreamingSession:
    """Sessão autenticada.

    Attributes:
        session_id: Token de sessão (nunca logar)
        instance_url: URL da instância (ex: https://acme.my.salesforce.com)
        user_id: ID do usuário autenticado
        organization_id: ID da organização
    """

    session_id: str
    instance_url: str
    user_id: str = ""
    organization_id: str = ""

    def __repr__(self) -> str:
        return (
            f"StreamingSession(instance_url={self.instance_url!r}, "
            f"user_id={self.user_id!r}, organization_id={self.organization_id!r})"
        )


class ChangeEventStreamProtocol(Protocol):
    """Assinatura confirmada; iterar entrega eventos brutos na ordem recebida.

    A iteração levanta StreamingAuthError quando a sessão é invalidada
    no meio do stream.
    """

    def __aiter__(self) -> AsyncIterator[RawChangeEvent]: ...

    async def aclose(self) -> None: ...


class StreamingTransportProtocol(Protocol):
    """Capacidade de entrada: autenticar e assinar um canal com replay."""

    async def authenticate(self) -> StreamingSession:
        """Levanta AuthenticationError se o login falhar."""
        ...

    async def subscribe(
        self,
        session: StreamingSession,
        channel: str,
        replay_id: Any,
    ) -> ChangeEventStreamProtocol:
        """Levanta SubscriptionError se o subscribe for rejeitado."""
        ...
