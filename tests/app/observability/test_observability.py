"""Testes de correlation_id e métricas via log estruturado."""

from __future__ import annotations

import logging

import pytest

from app.observability import (
    correlation_id_for_event,
    get_correlation_id,
    record_reconnect,
    record_webhook_delivery,
    reset_correlation_id,
    set_correlation_id,
)


class TestCorrelationId:
    def test_set_and_reset(self) -> None:
        token = set_correlation_id("replay-1")
        assert get_correlation_id() == "replay-1"
        reset_correlation_id(token)
        assert get_correlation_id() == ""

    def test_generates_uuid_when_empty(self) -> None:
        token = set_correlation_id()
        try:
            assert len(get_correlation_id()) == 36
        finally:
            reset_correlation_id(token)

    def test_event_correlation_id_uses_replay_id(self) -> None:
        assert correlation_id_for_event(42) == "replay-42"
        assert correlation_id_for_event(None) != correlation_id_for_event(None)


class TestMetrics:
    def test_reconnect_metric(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO):
            record_reconnect("/data/ContactChangeEvent", "auth_failure", 1, 5.0)

        record = next(r for r in caplog.records if r.getMessage() == "metric_reconnect")
        assert record.reason == "auth_failure"
        assert record.delay_seconds == 5.0

    def test_webhook_delivery_metric(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO):
            record_webhook_delivery(False, 12.3456, status_code=500)

        record = next(r for r in caplog.records if r.getMessage() == "metric_webhook_delivery")
        assert record.success is False
        assert record.status_code == 500
        assert record.latency_ms == 12.35
