"""Testes do login SOAP na Salesforce."""

from __future__ import annotations

import httpx
import pytest

from api.connectors.salesforce.auth import (
    build_login_envelope,
    login_endpoint,
    parse_login_response,
    soap_login,
)
from tests.fakes.fake_salesforce import LOGIN_OK_XML as LOGIN_OK
from utils.errors import AuthenticationError

LOGIN_FAULT = b"""<?xml version="1.0" encoding="UTF-8"?>
<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/"
    xmlns:sf="urn:fault.partner.soap.sforce.com">
  <soapenv:Body>
    <soapenv:Fault>
      <faultcode>sf:INVALID_LOGIN</faultcode>
      <faultstring>INVALID_LOGIN: Invalid username, password, security token.</faultstring>
    </soapenv:Fault>
  </soapenv:Body>
</soapenv:Envelope>"""


class TestParseLoginResponse:
    """Parsing do XML de resposta."""

    def test_success_extracts_session(self) -> None:
        session = parse_login_response(LOGIN_OK)

        assert session.session_id == "00Dxx0000000001!AQ4AQSecret"
        assert session.instance_url == "https://acme.my.salesforce.com"
        assert session.user_id == "005xx0000012345"
        assert session.organization_id == "00Dxx0000000001"

    def test_session_id_hidden_from_repr(self) -> None:
        assert "AQ4AQSecret" not in repr(parse_login_response(LOGIN_OK))

    def test_fault_raises_with_reason(self) -> None:
        with pytest.raises(AuthenticationError, match="INVALID_LOGIN"):
            parse_login_response(LOGIN_FAULT)

    def test_invalid_xml_raises(self) -> None:
        with pytest.raises(AuthenticationError, match="invalid_response"):
            parse_login_response(b"<html>oops")

    def test_missing_session_raises(self) -> None:
        body = b"""<env:Envelope xmlns:env="http://schemas.xmlsoap.org/soap/envelope/">
        <env:Body/></env:Envelope>"""
        with pytest.raises(AuthenticationError, match="missing_session"):
            parse_login_response(body)


class TestLoginEnvelope:
    def test_values_are_escaped(self) -> None:
        envelope = build_login_envelope("user@acme.com", "p<ss&word")
        assert "p&lt;ss&amp;word" in envelope
        assert "<n1:username>user@acme.com</n1:username>" in envelope

    def test_login_endpoint(self) -> None:
        assert (
            login_endpoint("https://login.salesforce.com/", "59.0")
            == "https://login.salesforce.com/services/Soap/u/59.0"
        )


class TestSoapLogin:
    """Chamada HTTP do login."""

    @pytest.mark.asyncio
    async def test_posts_soap_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=LOGIN_OK)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            session = await soap_login(
                client,
                login_url="https://login.salesforce.com",
                username="user@acme.com",
                password="secretTOKEN",
                api_version="59.0",
            )

        assert session.instance_url == "https://acme.my.salesforce.com"
        request = seen[0]
        assert str(request.url) == "https://login.salesforce.com/services/Soap/u/59.0"
        assert request.headers["SOAPAction"] == "login"
        assert b"secretTOKEN" in request.content

    @pytest.mark.asyncio
    async def test_fault_with_http_500_raises_authentication_error(self) -> None:
        transport = httpx.MockTransport(lambda r: httpx.Response(500, content=LOGIN_FAULT))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(AuthenticationError, match="INVALID_LOGIN"):
                await soap_login(
                    client,
                    login_url="https://login.salesforce.com",
                    username="u",
                    password="p",
                    api_version="59.0",
                )

    @pytest.mark.asyncio
    async def test_http_error_without_fault(self) -> None:
        transport = httpx.MockTransport(lambda r: httpx.Response(503, content=b"down"))
        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(AuthenticationError, match="salesforce_login_http_503"):
                await soap_login(
                    client,
                    login_url="https://login.salesforce.com",
                    username="u",
                    password="p",
                    api_version="59.0",
                )

    @pytest.mark.asyncio
    async def test_unreachable_endpoint(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("dns", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(AuthenticationError, match="unreachable"):
                await soap_login(
                    client,
                    login_url="https://login.salesforce.com",
                    username="u",
                    password="p",
                    api_version="59.0",
                )
