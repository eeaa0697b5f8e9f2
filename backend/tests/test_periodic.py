"""Tests for the periodic task runner and the timers the app starts."""

import asyncio

import pytest
from fastapi import FastAPI

from remindme.core.periodic import start_periodic_task, stop_periodic_tasks
from remindme.core.timeutil import DAY_MS, now_ms
from remindme.main import _start_background_tasks, create_app


TICK = 0.01
SLOW = 3600.0


async def _wait_until(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            return False
        await asyncio.sleep(TICK)
    return True


@pytest.mark.asyncio
async def test_failing_task_keeps_running():
    app = FastAPI()
    calls = []

    async def flaky():
        calls.append(1)
        raise RuntimeError("boom")

    start_periodic_task(app, name="flaky", interval_seconds=TICK, func=flaky, wait_first=False)
    try:
        assert await _wait_until(lambda: len(calls) >= 3)
    finally:
        await stop_periodic_tasks(app)


@pytest.mark.asyncio
async def test_stop_cancels_and_clears_tasks():
    app = FastAPI()

    async def idle():
        return None

    first = start_periodic_task(app, name="one", interval_seconds=TICK, func=idle)
    second = start_periodic_task(app, name="two", interval_seconds=SLOW, func=idle)
    assert app.state.periodic_tasks == [first, second]

    await stop_periodic_tasks(app)

    assert first.cancelled() and second.cancelled()
    assert app.state.periodic_tasks == []


@pytest.mark.asyncio
async def test_stop_without_tasks_is_noop():
    await stop_periodic_tasks(FastAPI())


@pytest.fixture
def timer_app(app_settings):
    app_settings.auto_save_interval_seconds = SLOW
    app_settings.recurrence_interval_seconds = SLOW
    app_settings.tag_rebuild_interval_seconds = SLOW
    app_settings.backup_interval_seconds = SLOW
    app = create_app(app_settings)
    store = app.state.store
    store.on_saved = None
    store.load()
    store.save()
    return app


def _count_saves(store):
    saves = []
    original = store.save

    def counting_save():
        saves.append(1)
        return original()

    store.save = counting_save
    return saves


@pytest.mark.asyncio
async def test_tag_rebuild_saves_only_when_counts_change(timer_app, app_settings):
    app_settings.tag_rebuild_interval_seconds = TICK
    store = timer_app.state.store
    repo = store.repository
    repo.create_reminder("Pay #rent")
    saves = _count_saves(store)

    _start_background_tasks(timer_app, app_settings)
    try:
        await asyncio.sleep(TICK * 10)
        assert saves == []

        repo.tags = {"#stale": 2}
        assert await _wait_until(lambda: repo.tags == {"#rent": 1})
        await asyncio.sleep(TICK * 10)
        assert saves == [1]
    finally:
        await stop_periodic_tasks(timer_app)


@pytest.mark.asyncio
async def test_auto_save_writes_dirty_store(timer_app, app_settings):
    app_settings.auto_save_interval_seconds = TICK
    store = timer_app.state.store
    store.dirty = True

    _start_background_tasks(timer_app, app_settings)
    try:
        assert await _wait_until(lambda: not store.dirty)
    finally:
        await stop_periodic_tasks(timer_app)


@pytest.mark.asyncio
async def test_recurrence_timer_reopens_reminders(timer_app, app_settings):
    app_settings.recurrence_interval_seconds = TICK
    repo = timer_app.state.store.repository
    reminder = repo.create_reminder("Water plants", recurring="daily")
    reminder.completed = True
    reminder.completed_at = now_ms() - 2 * DAY_MS

    _start_background_tasks(timer_app, app_settings)
    try:
        assert await _wait_until(lambda: not reminder.completed)
        assert reminder.completed_at is None
    finally:
        await stop_periodic_tasks(timer_app)
