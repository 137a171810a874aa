"""Leitura tipada de variáveis de ambiente.

Valores numéricos malformados levantam ConfigurationError (fatal no
startup) em vez de cair silenciosamente no default.
"""

from __future__ import annotations

import os

from utils.errors import ConfigurationError


def env_int(name: str, default: int) -> int:
    """Lê inteiro de variável de ambiente."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} deve ser inteiro: {raw!r}") from exc


def env_float(name: str, default: float) -> float:
    """Lê float de variável de ambiente."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} deve ser numérico: {raw!r}") from exc
