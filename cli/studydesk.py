#!/usr/bin/env python3
"""StudyDesk TUI — Pomodoro focus timer and study stats, powered by Textual."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable

import httpx
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.widgets import DataTable, Footer, Header, Label, ProgressBar, Static

from core.config import Config, load_config
from core.entities import StudyRecordCollection, SubjectCollection, TaskCollection, load_user
from core.errors import StudyDeskError
from core.local_store import LocalStore
from core.logger import setup_logging
from core.models import TimerMode, TimerSession
from core.pomodoro import PomodoroTimer
from core.stats import compile_stats
from core.validation import validate_timer_settings
from core.workspace import today_local, workspace_root

logger = logging.getLogger(__name__)


CSS = """
Screen {
    layout: vertical;
}

#main-layout {
    height: 1fr;
}

#timer-pane {
    width: 1fr;
    padding: 1 2;
    border: tall $primary-background-darken-2;
}

#stats-pane {
    width: 1fr;
    padding: 1 2;
    border: tall $primary-background-darken-2;
}

.section-title {
    text-style: bold;
    color: $accent;
    margin: 0 0 1 0;
}

#mode-label {
    text-style: bold;
}

#clock {
    height: 3;
    content-align: center middle;
    text-style: bold;
}

#timer-progress {
    margin: 1 0;
}

#counters, #settings-info {
    color: $text-muted;
    height: auto;
}

#stats-table {
    height: 1fr;
}
"""


# ── Scheduler adapter ──────────────────────────────────────────


class TextualScheduler:
    """Runs recurring callbacks on the Textual event loop via set_interval."""

    def __init__(self, app: App) -> None:
        self.app = app

    def call_every(self, interval: float, callback: Callable[[], None]) -> _TextualHandle:
        return _TextualHandle(self.app.set_interval(interval, callback))


class _TextualHandle:
    def __init__(self, timer: Timer) -> None:
        self._timer: Timer | None = timer

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None


# ── Widgets ────────────────────────────────────────────────────


class TimerPane(Vertical):
    """Mode, clock, progress and counters for the running timer."""

    def compose(self) -> ComposeResult:
        yield Label("Pomodoro", classes="section-title")
        yield Label("", id="mode-label")
        yield Static("", id="clock")
        yield ProgressBar(total=100, show_eta=False, id="timer-progress")
        yield Static("", id="counters")
        yield Static("", id="settings-info")

    def show(self, snap: TimerSession, clock: str, settings_text: str) -> None:
        state = "running" if snap.is_running else "paused"
        self.query_one("#mode-label", Label).update(f"{snap.mode.label} ({state})")
        self.query_one("#clock", Static).update(clock)
        self.query_one("#timer-progress", ProgressBar).update(progress=snap.progress)
        self.query_one("#counters", Static).update(
            f"Completed focus sessions: {snap.completed_focus_count}\n"
            f"Focus minutes: {snap.total_focus_minutes}"
        )
        self.query_one("#settings-info", Static).update(settings_text)


class StatsPane(Vertical):
    def compose(self) -> ComposeResult:
        yield Label("Progress", classes="section-title")
        yield DataTable(id="stats-table", show_cursor=False)

    def on_mount(self) -> None:
        self.query_one("#stats-table", DataTable).add_columns("Metric", "Value")


# ── Main app ───────────────────────────────────────────────────


class StudyDeskApp(App):
    """StudyDesk — focus timer with study progress."""

    TITLE = "StudyDesk"
    CSS = CSS

    BINDINGS = [
        Binding("space", "toggle_timer", "Start/Pause"),
        Binding("r", "reset_timer", "Reset"),
        Binding("n", "skip", "Skip"),
        Binding("1", "mode('focus')", "Focus"),
        Binding("2", "mode('shortBreak')", "Short"),
        Binding("3", "mode('longBreak')", "Long"),
        Binding("plus", "adjust_focus(5)", "+5m"),
        Binding("minus", "adjust_focus(-5)", "-5m"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, config: Config, subject_id: int | None = None) -> None:
        super().__init__()
        self.config = config
        self.subject_id = subject_id
        self.store = LocalStore()
        self.user = load_user(self.store)
        self.user_id = config.user_id or self.user.id
        self.client = httpx.Client(base_url=config.api_url, timeout=5.0) if config.api_url else None
        self.subjects = SubjectCollection(self.store, self.client, self.user_id, self._notify)
        self.tasks = TaskCollection(self.store, self.client, self.user_id, self._notify)
        self.records = StudyRecordCollection(self.store, self.client, self.user_id, self._notify)
        self.timer = PomodoroTimer(
            TextualScheduler(self),
            settings=self.store.load_settings(),
            notifier=self._notify,
            settings_sink=self.store,
        )
        self._unsubscribe: Callable[[], None] | None = None
        self._last_focus_minutes = 0

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(TimerPane(id="timer-pane"), StatsPane(id="stats-pane"), id="main-layout")
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.timer.subscribe(self._on_timer_change)
        self._on_timer_change(self.timer.snapshot())
        self._load_collections()

    def on_unmount(self) -> None:
        self._release_resources()

    def _release_resources(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.timer.close()
        if self.client is not None:
            self.client.close()
            self.client = None

    def _notify(self, title: str, description: str) -> None:
        severity = "error" if title == "Error" else "information"
        self.notify(description, title=title, severity=severity)

    # ── Timer updates ──────────────────────────────────────────

    def _on_timer_change(self, snap: TimerSession) -> None:
        s = self.timer.settings
        settings_text = (
            f"Focus {s.focus_minutes}m · Short {s.short_break_minutes}m · "
            f"Long {s.long_break_minutes}m · Long break every {s.sessions_before_long_break}"
        )
        self.query_one(TimerPane).show(snap, self.timer.formatted_time, settings_text)
        self.sub_title = f"{snap.mode.label} {self.timer.formatted_time}"
        minutes = snap.total_focus_minutes - self._last_focus_minutes
        if minutes > 0:
            self._last_focus_minutes = snap.total_focus_minutes
            self._record_focus(minutes)

    @work(thread=True)
    def _record_focus(self, minutes: int) -> None:
        """Log newly counted focus minutes as a study time record."""
        if self.subject_id is None:
            return
        try:
            self.records.add(
                {
                    "subjectId": self.subject_id,
                    "date": today_local().isoformat(),
                    "duration": minutes,
                }
            )
        except StudyDeskError as e:
            logger.error("Could not record focus session: %s", e)
            return
        self.call_from_thread(self._refresh_stats)

    # ── Data loading ───────────────────────────────────────────

    @work(thread=True)
    def _load_collections(self) -> None:
        self.subjects.load()
        self.tasks.load()
        self.records.load()
        self.call_from_thread(self._refresh_stats)

    def _refresh_stats(self) -> None:
        summary = compile_stats(self.records.items, self.tasks.items, today_local())
        names = {s.id: s.name for s in self.subjects.items}
        table = self.query_one("#stats-table", DataTable)
        table.clear()
        table.add_row("Today", summary.today_study_time)
        table.add_row("Tasks completed", summary.tasks_completed)
        table.add_row("Streak", f"{summary.streak} days")
        table.add_row("Focus score", summary.focus_score)
        table.add_row("Week", f"{summary.week_start} – {summary.week_end}")
        for subject_id, minutes in sorted(summary.subject_distribution.items()):
            table.add_row(names.get(subject_id, f"Subject {subject_id}"), f"{minutes} min")

    # ── Actions ────────────────────────────────────────────────

    def action_toggle_timer(self) -> None:
        if self.timer.is_running:
            self.timer.pause()
        else:
            self.timer.start()

    def action_reset_timer(self) -> None:
        self.timer.reset()

    def action_skip(self) -> None:
        self.timer.skip_to_next()

    def action_mode(self, mode: str) -> None:
        self.timer.set_mode(TimerMode(mode))

    def action_adjust_focus(self, delta: int) -> None:
        changes = {"focusDuration": self.timer.settings.focus_minutes + delta}
        errors = validate_timer_settings(changes)
        if errors:
            self.bell()
            return
        self.timer.update_settings(changes)


# ── Entry point ────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="studydesk", description="Pomodoro focus timer")
    parser.add_argument("--subject-id", type=int, default=None, help="record finished focus blocks for this subject")
    args = parser.parse_args(argv)

    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set STUDYDESK_ROOT or create the directory first.")
        sys.exit(1)

    config = load_config(root)
    setup_logging(config.log_level, config.log_dir or None)
    StudyDeskApp(config, subject_id=args.subject_id).run()


if __name__ == "__main__":
    main()
