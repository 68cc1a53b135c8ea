"""Tests for cli/studydesk.py — Textual app driven through run_test()."""

import asyncio

from cli.studydesk import StudyDeskApp
from core.config import Config
from core.models import TimerMode


def _run(scenario, subject_id=1):
    """Mount the app, run *scenario(app, pilot)*, exit, and return the app."""

    async def main():
        app = StudyDeskApp(Config(api_url=""), subject_id=subject_id)
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await scenario(app, pilot)
            await app.workers.wait_for_complete()
        return app

    return asyncio.run(main())


def test_mount_and_exit_releases_timer(workspace):
    async def scenario(app, pilot):
        await pilot.press("space")
        assert app.timer.is_running is True

    app = _run(scenario)
    assert app.timer.is_running is False
    assert app.client is None
    assert [s.name for s in app.subjects.items] == ["Calculus", "Physics", "Biology"]


def test_quit_binding_exits_cleanly(workspace):
    async def scenario(app, pilot):
        await pilot.press("space")
        await pilot.press("q")

    app = _run(scenario)
    assert app.timer.is_running is False


def test_space_ticks_through_textual_interval(workspace):
    async def scenario(app, pilot):
        await pilot.press("space")
        await pilot.pause(1.3)
        assert app.timer.seconds_remaining < 1500
        await pilot.press("space")
        assert app.timer.is_running is False
        paused_at = app.timer.seconds_remaining
        await pilot.pause(1.2)
        assert app.timer.seconds_remaining == paused_at

    _run(scenario)


def test_reset_and_mode_bindings(workspace):
    async def scenario(app, pilot):
        await pilot.press("2")
        assert app.timer.mode is TimerMode.SHORT_BREAK
        await pilot.press("space")
        await pilot.press("r")
        assert app.timer.is_running is False
        assert app.timer.seconds_remaining == 300
        await pilot.press("1")
        assert app.timer.mode is TimerMode.FOCUS

    _run(scenario)


def test_skip_without_focus_time_records_nothing(workspace):
    async def scenario(app, pilot):
        await pilot.press("n")
        await app.workers.wait_for_complete()
        assert app.timer.mode is TimerMode.SHORT_BREAK
        assert app.timer.completed_focus_count == 1
        assert app.records.items == []

    _run(scenario)


def test_completed_focus_is_recorded(workspace):
    async def scenario(app, pilot):
        app.timer.start()
        app.timer.session.seconds_remaining = 1
        app.timer.tick()
        await app.workers.wait_for_complete()
        assert app.timer.mode is TimerMode.SHORT_BREAK
        records = app.records.items
        assert [(r.subject_id, r.duration) for r in records] == [(1, 25)]

    app = _run(scenario)
    assert app.store.get("studyTimeRecords")[0]["duration"] == 25


def test_no_subject_records_nothing(workspace):
    async def scenario(app, pilot):
        app.timer.start()
        app.timer.session.seconds_remaining = 1
        app.timer.tick()
        await app.workers.wait_for_complete()
        assert app.timer.total_focus_minutes == 25
        assert app.records.items == []

    _run(scenario, subject_id=None)
