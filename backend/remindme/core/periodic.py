"""
Periodic background tasks bound to the FastAPI lifespan.

Each task runs its callable every ``interval_seconds``. Failures are logged
and the loop keeps going; tasks stop only when cancelled at shutdown.
"""
import asyncio
import logging
from typing import Awaitable, Callable, List

from fastapi import FastAPI


logger = logging.getLogger(__name__)

_TASKS_STATE_KEY = "periodic_tasks"


def start_periodic_task(
    app: FastAPI,
    *,
    name: str,
    interval_seconds: float,
    func: Callable[[], Awaitable[None]],
    wait_first: bool = True,
) -> asyncio.Task:
    """Start ``func`` on a fixed interval and register the task on ``app.state``."""
    tasks: List[asyncio.Task] = getattr(app.state, _TASKS_STATE_KEY, None)
    if tasks is None:
        tasks = []
        setattr(app.state, _TASKS_STATE_KEY, tasks)

    async def _runner() -> None:
        if wait_first:
            await asyncio.sleep(interval_seconds)
        while True:
            try:
                await func()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Periodic task %s failed", name)
            await asyncio.sleep(interval_seconds)

    task = asyncio.create_task(_runner(), name=name)
    tasks.append(task)
    logger.debug("Started periodic task %s every %ss", name, interval_seconds)
    return task


async def stop_periodic_tasks(app: FastAPI) -> None:
    """Cancel every registered periodic task and wait for them to finish."""
    tasks: List[asyncio.Task] = getattr(app.state, _TASKS_STATE_KEY, None)
    if not tasks:
        return

    for task in tasks:
        task.cancel()
    try:
        await asyncio.gather(*tasks, return_exceptions=True)
    finally:
        setattr(app.state, _TASKS_STATE_KEY, [])
        logger.info("Periodic tasks stopped")
