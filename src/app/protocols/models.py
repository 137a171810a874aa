"""Modelos canônicos do pipeline CDC.

NormalizedChangeEvent é o contrato estável entre o normalizer, o buffer
de eventos, o webhook e a superfície de leitura HTTP.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

HEADER_KEY = "ChangeEventHeader"

# Payload bruto do CometD: {"schema": ..., "payload": {...}, "event": {"replayId": n}}
RawChangeEvent = dict[str, Any]


def _freeze(values: dict[str, Any] | None) -> MappingProxyType[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True, slots=True)
class NormalizedChangeEvent:
    """Evento CDC normalizado (imutável após a criação).

    Atributos:
        replay_id: Cursor opaco da origem, usado para retomar a assinatura
        received_at: Momento do processamento local (ISO-8601, UTC)
        entity_name: Objeto alterado (ex: Contact)
        change_type: CREATE | UPDATE | DELETE | UNDELETE (GAP_* repassados)
        record_ids: IDs dos registros afetados
        changed_fields: Nomes dos campos alterados
        changed_values: Todas as chaves do payload exceto o header
        commit_timestamp: Commit na origem (ISO-8601, UTC) ou None
        commit_user: ID do usuário do commit
        transaction_key: Chave da transação na origem
        change_origin: Origem da mudança (ex: com/salesforce/api/rest/59.0)
        sequence_number: Posição do evento dentro da transação
        commit_number: Número do commit na origem
        schema_id: ID do schema Avro do evento
    """

    replay_id: Any
    received_at: str
    entity_name: str | None = None
    change_type: str | None = None
    record_ids: tuple[Any, ...] = ()
    changed_fields: tuple[Any, ...] = ()
    changed_values: MappingProxyType[str, Any] = field(default_factory=lambda: _freeze(None))
    commit_timestamp: str | None = None
    commit_user: str | None = None
    transaction_key: str | None = None
    change_origin: str | None = None
    sequence_number: int | None = None
    commit_number: int | None = None
    schema_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.changed_values, MappingProxyType):
            object.__setattr__(self, "changed_values", _freeze(self.changed_values))
        object.__setattr__(self, "record_ids", tuple(self.record_ids))
        object.__setattr__(self, "changed_fields", tuple(self.changed_fields))

    @property
    def is_gap(self) -> bool:
        return bool(self.change_type) and str(self.change_type).startswith("GAP_")

    def to_dict(self) -> dict[str, Any]:
        """Serializa no formato JSON entregue ao webhook e à API de leitura."""
        return {
            "replayId": self.replay_id,
            "receivedAt": self.received_at,
            "entityName": self.entity_name,
            "changeType": self.change_type,
            "recordIds": list(self.record_ids),
            "changedFields": list(self.changed_fields),
            "changedValues": dict(self.changed_values),
            "commitTimestamp": self.commit_timestamp,
            "commitUser": self.commit_user,
            "transactionKey": self.transaction_key,
            "changeOrigin": self.change_origin,
            "sequenceNumber": self.sequence_number,
            "commitNumber": self.commit_number,
            "schemaId": self.schema_id,
        }

    def to_log_dict(self) -> dict[str, Any]:
        """Resumo seguro para logs: nunca inclui valores de campos."""
        return {
            "replay_id": self.replay_id,
            "entity_name": self.entity_name,
            "change_type": self.change_type,
            "record_count": len(self.record_ids),
            "changed_fields": list(self.changed_fields),
            "commit_timestamp": self.commit_timestamp,
        }
