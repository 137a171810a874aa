"""Extrator de eventos CDC da Salesforce.

Separa o bloco ChangeEventHeader dos valores alterados e lê o replay id.
Apenas extração estrutural: blocos ausentes ou com tipo inesperado viram
vazios, nunca erro.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from app.protocols.models import HEADER_KEY


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def extract_payload(raw: Any) -> Mapping[str, Any]:
    """Retorna o bloco `payload` do evento bruto (vazio se ausente)."""
    return _as_mapping(_as_mapping(raw).get("payload"))


def extract_header(raw: Any) -> Mapping[str, Any]:
    """Retorna o ChangeEventHeader (vazio se ausente)."""
    return _as_mapping(extract_payload(raw).get(HEADER_KEY))


def extract_changed_values(raw: Any) -> dict[str, Any]:
    """Retorna todas as chaves do payload exceto o header.

    Chaves desconhecidas são mantidas: campos novos na origem chegam ao
    destino sem mudança de código.
    """
    return {key: value for key, value in extract_payload(raw).items() if key != HEADER_KEY}


def extract_replay_id(raw: Any) -> Any:
    """Retorna event.replayId ou None."""
    return _as_mapping(_as_mapping(raw).get("event")).get("replayId")


def extract_schema_id(raw: Any) -> str | None:
    schema = _as_mapping(raw).get("schema")
    return schema if isinstance(schema, str) else None


def extract_header_list(header: Mapping[str, Any], key: str) -> tuple[Any, ...]:
    """Copia uma lista do header sem alterar os itens; não-lista vira ()."""
    value = header.get(key)
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(value)
