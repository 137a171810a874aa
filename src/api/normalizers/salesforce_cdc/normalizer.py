"""Normalizer CDC — converte eventos brutos para NormalizedChangeEvent.

Função pura e total: não faz I/O, não loga e não levanta para nenhum
evento bruto. Campos opcionais ausentes viram (), () e None.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from app.protocols.models import NormalizedChangeEvent

from .extractor import (
    extract_changed_values,
    extract_header,
    extract_header_list,
    extract_replay_id,
    extract_schema_id,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def to_iso8601(moment: datetime) -> str:
    """Formata em UTC com milissegundos e sufixo Z (2023-11-14T22:13:20.000Z)."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_millis_to_iso(value: Any) -> str | None:
    """Converte epoch em milissegundos para ISO-8601.

    Ausente, zero, booleano ou não numérico retorna None.
    """
    if isinstance(value, bool) or not value:
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    try:
        return to_iso8601(_EPOCH + timedelta(milliseconds=int(value)))
    except (OverflowError, ValueError):
        return None


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def normalize_change_event(
    raw: Any,
    *,
    received_at: datetime | None = None,
) -> NormalizedChangeEvent:
    """Normaliza um evento CDC bruto.

    Args:
        raw: Evento entregue pelo CometD ({"payload": ..., "event": ...}).
        received_at: Momento do processamento local (default: agora, UTC).

    Returns:
        NormalizedChangeEvent imutável.
    """
    header = extract_header(raw)
    return NormalizedChangeEvent(
        replay_id=extract_replay_id(raw),
        received_at=to_iso8601(received_at or datetime.now(UTC)),
        entity_name=_optional_str(header.get("entityName")),
        change_type=_optional_str(header.get("changeType")),
        record_ids=extract_header_list(header, "recordIds"),
        changed_fields=extract_header_list(header, "changedFields"),
        changed_values=extract_changed_values(raw),
        commit_timestamp=epoch_millis_to_iso(header.get("commitTimestamp")),
        commit_user=_optional_str(header.get("commitUser")),
        transaction_key=_optional_str(header.get("transactionKey")),
        change_origin=_optional_str(header.get("changeOrigin")),
        sequence_number=_optional_int(header.get("sequenceNumber")),
        commit_number=_optional_int(header.get("commitNumber")),
        schema_id=extract_schema_id(raw),
    )
