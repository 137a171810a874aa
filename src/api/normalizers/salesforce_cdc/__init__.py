"""Normalizer Salesforce CDC — extração e normalização de change events.

Responsabilidades:
- Separar ChangeEventHeader dos valores alterados
- Normalizar para o modelo interno NormalizedChangeEvent
- Tolerar campos opcionais ausentes (nunca levanta)
"""

from .extractor import extract_changed_values, extract_header, extract_replay_id
from .normalizer import epoch_millis_to_iso, normalize_change_event, to_iso8601

__all__ = [
    "epoch_millis_to_iso",
    "extract_changed_values",
    "extract_header",
    "extract_replay_id",
    "normalize_change_event",
    "to_iso8601",
]
