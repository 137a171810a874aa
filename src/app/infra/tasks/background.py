"""Tasks assíncronas desacopladas do pipeline (fire-and-forget).

Quem agenda nunca aguarda o resultado; falhas são apenas logadas no
done-callback. Não há fila: com `max_concurrency` tasks em andamento, a
coroutine nova é descartada. No shutdown, drain() espera as pendentes e
cancela o resto.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Coroutine

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 100


class BackgroundTaskRunner:
    """Agenda coroutines com limite de concorrência, sem enfileirar.

    Args:
        max_concurrency: Máximo de tasks em andamento; acima disso
            schedule() descarta a coroutine e retorna False.
        component: Nome usado nos logs (ex: "webhook_forwarder").
    """

    def __init__(
        self,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        component: str = "background",
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency deve ser >= 1")
        self._max_concurrency = max_concurrency
        self._active_tasks: set[asyncio.Task[Any]] = set()
        self._component = component
        self._dropped = 0

    @property
    def active_count(self) -> int:
        return len(self._active_tasks)

    @property
    def dropped_count(self) -> int:
        return self._dropped

    def schedule(self, coroutine: Coroutine[Any, Any, None], *, name: str | None = None) -> bool:
        """Agenda a coroutine e retorna imediatamente.

        Returns:
            True se agendada; False se descartada por saturação.
        """
        if len(self._active_tasks) >= self._max_concurrency:
            coroutine.close()
            self._dropped += 1
            logger.warning(
                "background_task_dropped",
                extra={
                    "component": self._component,
                    "task_name": name,
                    "active_tasks": len(self._active_tasks),
                    "dropped_total": self._dropped,
                },
            )
            return False

        task = asyncio.create_task(coroutine, name=name)
        self._active_tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return True

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._active_tasks.discard(task)
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "background_task_failed",
                    extra={
                        "component": self._component,
                        "task_name": task.get_name(),
                        "error_type": type(exc).__name__,
                        "active_tasks": len(self._active_tasks),
                    },
                )

    async def drain(self, timeout_seconds: float = 30.0) -> None:
        """Aguarda tasks pendentes durante o shutdown do processo."""
        if not self._active_tasks:
            return

        pending_now = list(self._active_tasks)
        logger.info(
            "background_tasks_shutdown_wait",
            extra={
                "component": self._component,
                "pending_tasks": len(pending_now),
                "timeout_seconds": timeout_seconds,
            },
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            return

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning(
            "background_tasks_shutdown_cancelled",
            extra={"component": self._component, "cancelled_tasks": len(pending)},
        )
