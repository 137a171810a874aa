"""Agregador de settings do cdc_relay.

Re-exporta settings e getters de cada módulo (um módulo por domínio).
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.pipeline import (
    PipelineSettings,
    get_pipeline_settings,
)
from config.settings.salesforce import (
    REPLAY_ALL_RETAINED,
    REPLAY_NEWEST,
    SalesforceSettings,
    get_salesforce_settings,
)
from config.settings.webhook import (
    WebhookSettings,
    get_webhook_settings,
)

__all__ = [
    "REPLAY_ALL_RETAINED",
    "REPLAY_NEWEST",
    "BaseSettings",
    "Environment",
    "PipelineSettings",
    "SalesforceSettings",
    "WebhookSettings",
    "get_base_settings",
    "get_pipeline_settings",
    "get_salesforce_settings",
    "get_webhook_settings",
]
