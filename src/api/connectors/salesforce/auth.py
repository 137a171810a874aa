"""Login na Salesforce via SOAP partner API (usuário + senha + token).

O endpoint retorna sessionId e serverUrl; a URL da instância (usada pelo
CometD) é o scheme + host do serverUrl.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlsplit
from xml.etree import ElementTree
from xml.sax.saxutils import escape

import httpx

from app.protocols.streaming import StreamingSession
from utils.errors import AuthenticationError

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

logger = logging.getLogger(__name__)

_PARTNER_NS = "urn:partner.soap.sforce.com"
_SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"

_LOGIN_ENVELOPE = """<?xml version="1.0" encoding="utf-8" ?>
<env:Envelope xmlns:xsd="http://www.w3.org/2001/XMLSchema"
    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
    xmlns:env="http://schemas.xmlsoap.org/soap/envelope/">
  <env:Body>
    <n1:login xmlns:n1="urn:partner.soap.sforce.com">
      <n1:username>{username}</n1:username>
      <n1:password>{password}</n1:password>
    </n1:login>
  </env:Body>
</env:Envelope>"""


def build_login_envelope(username: str, password: str) -> str:
    """Monta o envelope SOAP de login (valores escapados)."""
    return _LOGIN_ENVELOPE.format(username=escape(username), password=escape(password))


def login_endpoint(login_url: str, api_version: str) -> str:
    return f"{login_url.rstrip('/')}/services/Soap/u/{api_version}"


def _find_text(root: Element, tag: str, ns: str = _PARTNER_NS) -> str:
    node = root.find(f".//{{{ns}}}{tag}")
    return (node.text or "").strip() if node is not None else ""


def parse_login_response(body: bytes | str) -> StreamingSession:
    """Extrai a sessão do XML de resposta do login.

    Raises:
        AuthenticationError: SOAP fault, XML inválido ou campos ausentes.
    """
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError as exc:
        raise AuthenticationError("salesforce_login_invalid_response") from exc

    fault = root.find(f".//{{{_SOAP_ENV_NS}}}Fault")
    if fault is not None:
        fault_code = (fault.findtext("faultcode") or "").strip()
        fault_string = (fault.findtext("faultstring") or "").strip()
        raise AuthenticationError(f"{fault_code}: {fault_string}".strip(": "))

    session_id = _find_text(root, "sessionId")
    server_url = _find_text(root, "serverUrl")
    if not session_id or not server_url:
        raise AuthenticationError("salesforce_login_missing_session")

    parts = urlsplit(server_url)
    return StreamingSession(
        session_id=session_id,
        instance_url=f"{parts.scheme}://{parts.netloc}",
        user_id=_find_text(root, "userId"),
        organization_id=_find_text(root, "organizationId"),
    )


async def soap_login(
    http_client: httpx.AsyncClient,
    *,
    login_url: str,
    username: str,
    password: str,
    api_version: str,
) -> StreamingSession:
    """Autentica e retorna a sessão.

    Args:
        http_client: Cliente httpx async (fechado por quem chama).
        login_url: Ex: https://login.salesforce.com
        username: Usuário da integração.
        password: Senha já concatenada ao security token.
        api_version: Ex: "59.0".

    Raises:
        AuthenticationError: credenciais rejeitadas ou endpoint inalcançável.
    """
    endpoint = login_endpoint(login_url, api_version)
    try:
        response = await http_client.post(
            endpoint,
            content=build_login_envelope(username, password).encode("utf-8"),
            headers={
                "Content-Type": "text/xml; charset=UTF-8",
                "SOAPAction": "login",
            },
        )
    except httpx.HTTPError as exc:
        logger.error(
            "salesforce_login_unreachable",
            extra={"login_url": login_url, "error_type": type(exc).__name__},
        )
        raise AuthenticationError("salesforce_login_unreachable") from exc

    # Fault de credencial chega como HTTP 500 com corpo SOAP
    if response.status_code >= 400 and b"Fault" not in response.content:
        raise AuthenticationError(f"salesforce_login_http_{response.status_code}")

    session = parse_login_response(response.content)
    logger.info(
        "salesforce_login_ok",
        extra={"instance_url": session.instance_url, "user_id": session.user_id},
    )
    return session
