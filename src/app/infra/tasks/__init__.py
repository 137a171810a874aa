"""Execução de tasks em background."""

from .background import DEFAULT_MAX_CONCURRENCY, BackgroundTaskRunner

__all__ = [
    "DEFAULT_MAX_CONCURRENCY",
    "BackgroundTaskRunner",
]
