"""Testes para o runner de tasks desacopladas (fire-and-forget)."""

from __future__ import annotations

import asyncio

import pytest

from app.infra.tasks import BackgroundTaskRunner


async def _wait_until_tasks_empty(runner: BackgroundTaskRunner, timeout: float = 1.0) -> None:
    start = asyncio.get_running_loop().time()
    while runner.active_count:
        if asyncio.get_running_loop().time() - start > timeout:
            break
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_schedule_runs_coroutine_and_cleans_active_set() -> None:
    runner = BackgroundTaskRunner()
    event = asyncio.Event()

    async def _work() -> None:
        event.set()

    scheduled = runner.schedule(_work(), name="webhook-1")

    assert scheduled is True
    assert runner.active_count == 1
    await asyncio.wait_for(event.wait(), timeout=1.0)
    await _wait_until_tasks_empty(runner)
    assert runner.active_count == 0


@pytest.mark.asyncio
async def test_schedule_logs_failure(caplog: pytest.LogCaptureFixture) -> None:
    runner = BackgroundTaskRunner(component="webhook_forwarder")

    async def _boom() -> None:
        raise RuntimeError("boom")

    with caplog.at_level("ERROR"):
        runner.schedule(_boom(), name="webhook-2")
        await _wait_until_tasks_empty(runner)

    assert "background_task_failed" in caplog.text
    record = next(r for r in caplog.records if r.getMessage() == "background_task_failed")
    assert record.component == "webhook_forwarder"
    assert record.error_type == "RuntimeError"


@pytest.mark.asyncio
async def test_saturated_runner_drops_instead_of_queueing(
    caplog: pytest.LogCaptureFixture,
) -> None:
    runner = BackgroundTaskRunner(max_concurrency=2, component="webhook_forwarder")
    gate = asyncio.Event()
    running = 0
    peak = 0

    async def _work() -> None:
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await gate.wait()
        running -= 1

    with caplog.at_level("WARNING"):
        scheduled = [runner.schedule(_work(), name=f"task-{i}") for i in range(1000)]
    await asyncio.sleep(0.02)

    assert scheduled[:2] == [True, True]
    assert not any(scheduled[2:])
    assert peak == 2
    assert runner.active_count == 2
    assert runner.dropped_count == 998
    record = next(r for r in caplog.records if r.getMessage() == "background_task_dropped")
    assert record.component == "webhook_forwarder"
    assert record.task_name == "task-2"

    gate.set()
    await runner.drain(timeout_seconds=1.0)
    assert runner.active_count == 0


@pytest.mark.asyncio
async def test_dropped_coroutine_is_closed() -> None:
    runner = BackgroundTaskRunner(max_concurrency=1)
    gate = asyncio.Event()

    async def _work() -> None:
        await gate.wait()

    runner.schedule(_work())
    dropped = _work()

    assert runner.schedule(dropped) is False
    assert dropped.cr_frame is None

    gate.set()
    await runner.drain(timeout_seconds=1.0)


@pytest.mark.asyncio
async def test_capacity_frees_up_after_tasks_finish() -> None:
    runner = BackgroundTaskRunner(max_concurrency=1)

    async def _work() -> None:
        return None

    assert runner.schedule(_work()) is True
    await _wait_until_tasks_empty(runner)
    assert runner.schedule(_work()) is True
    await runner.drain(timeout_seconds=1.0)
    assert runner.dropped_count == 0


def test_invalid_max_concurrency() -> None:
    with pytest.raises(ValueError):
        BackgroundTaskRunner(max_concurrency=0)


@pytest.mark.asyncio
async def test_drain_returns_immediately_when_empty() -> None:
    runner = BackgroundTaskRunner()
    await runner.drain(timeout_seconds=0.01)
    assert runner.active_count == 0


@pytest.mark.asyncio
async def test_drain_waits_and_finishes_without_cancel() -> None:
    runner = BackgroundTaskRunner()
    event = asyncio.Event()

    async def _short_work() -> None:
        await asyncio.sleep(0.02)
        event.set()

    runner.schedule(_short_work())
    await runner.drain(timeout_seconds=0.5)

    assert event.is_set() is True
    assert runner.active_count == 0


@pytest.mark.asyncio
async def test_drain_cancels_pending_tasks(caplog: pytest.LogCaptureFixture) -> None:
    runner = BackgroundTaskRunner()
    gate = asyncio.Event()

    async def _pending_work() -> None:
        await gate.wait()

    runner.schedule(_pending_work())
    await asyncio.sleep(0)

    with caplog.at_level("WARNING"):
        await runner.drain(timeout_seconds=0.01)

    assert "background_tasks_shutdown_cancelled" in caplog.text
    assert runner.active_count == 0
