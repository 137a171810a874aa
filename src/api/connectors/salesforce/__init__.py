"""Connector Salesforce — login SOAP e Streaming API (CometD).

Responsabilidades:
- Autenticar (usuário + senha + security token) e obter a sessão
- Handshake/subscribe/connect Bayeux com extensão de replay
- Sinalizar sessão inválida via StreamingAuthError
"""

from .auth import parse_login_response, soap_login
from .cometd import CometdChangeEventStream, CometdClient, is_auth_failure
from .transport import SalesforceStreamingTransport

__all__ = [
    "CometdChangeEventStream",
    "CometdClient",
    "SalesforceStreamingTransport",
    "is_auth_failure",
    "parse_login_response",
    "soap_login",
]
