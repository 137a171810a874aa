"""Normalizers — conversão de payloads externos para modelos internos.

Estrutura:
- salesforce_cdc/: change events da Salesforce Streaming API
"""

from .salesforce_cdc import normalize_change_event

__all__ = [
    "normalize_change_event",
]
