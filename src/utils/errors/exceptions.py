"""Exceções de domínio do pipeline CDC.

Falhas recuperáveis herdam de InfrastructureError; falhas de startup
(configuração e login inicial) são fatais e encerram o processo.
"""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class ConfigurationError(RuntimeError):
    """Configuração obrigatória ausente ou inválida (fatal no startup)."""


class AuthenticationError(RuntimeError):
    """Login na Salesforce rejeitado ou inalcançável."""


class SubscriptionError(InfrastructureError):
    """Handshake ou subscribe CometD rejeitado pelo servidor."""


class StreamingAuthError(InfrastructureError):
    """Sessão de streaming invalidada no meio do stream (ex.: expirou)."""


class StreamingTransportError(InfrastructureError):
    """Falha de rede ou resposta malformada no canal de streaming."""
