"""Pomodoro focus timer.

A countdown with three modes (focus, short break, long break). When a
countdown runs out the timer moves to the next mode on its own: focus goes
to a short break, or to a long break every ``sessions_before_long_break``
completed focus sessions; breaks always go back to focus. The timer stops
after each transition and waits for ``start()``.

The timer owns no thread. A ``Scheduler`` calls ``tick()`` once a second
while running, and UI code follows state changes through ``subscribe()``.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Protocol

from core.dateutils import format_clock
from core.models import TimerMode, TimerSession, TimerSettings
from core.scheduling import Handle, Scheduler

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0

Listener = Callable[[TimerSession], None]


class Notifier(Protocol):
    def __call__(self, title: str, description: str) -> None: ...


class SettingsSink(Protocol):
    def save_settings(self, settings: TimerSettings) -> None: ...


def logging_notifier(title: str, description: str) -> None:
    """Default notifier: write the notification to the log."""
    logger.info("%s: %s", title, description)


class PomodoroTimer:
    def __init__(
        self,
        scheduler: Scheduler,
        settings: TimerSettings | None = None,
        notifier: Notifier | None = None,
        settings_sink: SettingsSink | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.settings = settings or TimerSettings()
        self.notifier: Notifier = notifier or logging_notifier
        self.settings_sink = settings_sink
        self.session = TimerSession(
            mode=TimerMode.FOCUS,
            seconds_remaining=self.settings.duration_seconds(TimerMode.FOCUS),
        )
        self._handle: Handle | None = None
        self._listeners: list[Listener] = []
        # Seconds counted down since the last reset; only meaningful once started.
        self._elapsed_seconds = 0
        self._started = False

    # ── Read-only views ───────────────────────────────────────

    @property
    def mode(self) -> TimerMode:
        return self.session.mode

    @property
    def seconds_remaining(self) -> int:
        return self.session.seconds_remaining

    @property
    def is_running(self) -> bool:
        return self.session.is_running

    @property
    def completed_focus_count(self) -> int:
        return self.session.completed_focus_count

    @property
    def total_focus_minutes(self) -> int:
        return self.session.total_focus_minutes

    @property
    def progress(self) -> float:
        return self.session.progress

    @property
    def formatted_time(self) -> str:
        return format_clock(self.session.seconds_remaining)

    @property
    def mode_duration_seconds(self) -> int:
        return self.settings.duration_seconds(self.session.mode)

    def snapshot(self) -> TimerSession:
        s = self.session
        return TimerSession(
            mode=s.mode,
            seconds_remaining=s.seconds_remaining,
            is_running=s.is_running,
            completed_focus_count=s.completed_focus_count,
            total_focus_minutes=s.total_focus_minutes,
            progress=s.progress,
        )

    # ── Subscriptions ─────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with a snapshot after every state change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Timer listener %r failed", listener)

    def _notify(self, title: str, description: str) -> None:
        try:
            self.notifier(title, description)
        except Exception:
            logger.exception("Notifier failed for %r", title)

    # ── Controls ──────────────────────────────────────────────

    def start(self) -> None:
        """Start counting down. No-op when already running or at zero."""
        if self.session.is_running or self.session.seconds_remaining == 0:
            return
        self._cancel_tick()
        self.session.is_running = True
        self._started = True
        self._handle = self.scheduler.call_every(TICK_SECONDS, self.tick)
        logger.debug("Timer started in %s with %ss left", self.mode.value, self.seconds_remaining)
        self._emit()

    def pause(self) -> None:
        """Stop counting down, keeping the remaining time. No-op when stopped."""
        if not self.session.is_running:
            return
        self._cancel_tick()
        self.session.is_running = False
        self._emit()

    def reset(self) -> None:
        """Stop and refill the current mode. Mode and counters are untouched."""
        self._restart_mode(self.session.mode)
        self._emit()

    def set_mode(self, mode: TimerMode | str) -> None:
        """Switch mode by hand. Never counts as a completed session."""
        self._restart_mode(TimerMode(mode))
        logger.debug("Timer mode set to %s", self.mode.value)
        self._emit()

    def skip_to_next(self) -> None:
        """Jump to the next mode as if the current one had finished."""
        s = self.session
        if s.mode is TimerMode.FOCUS:
            s.completed_focus_count += 1
            if self._started:
                s.total_focus_minutes += math.ceil(self._elapsed_seconds / 60)
            next_mode = self._next_break_mode()
        else:
            next_mode = TimerMode.FOCUS
        self._restart_mode(next_mode)
        self._emit()

    def update_settings(self, changes: dict[str, Any] | None = None, **kwargs: Any) -> None:
        """Merge new durations/threshold, persist them, and reset the timer.

        Keys may be camelCase (``focusDuration``) or snake_case
        (``focus_minutes``). Values must already be validated.
        """
        merged = dict(changes or {})
        merged.update(kwargs)
        self.settings = self.settings.merged(merged)
        if self.settings_sink is not None:
            try:
                self.settings_sink.save_settings(self.settings)
            except Exception:
                logger.exception("Failed to persist timer settings")
        self.reset()

    def close(self) -> None:
        """Tear down: cancel the pending tick and drop all listeners."""
        self._cancel_tick()
        self.session.is_running = False
        self._listeners.clear()

    # ── Tick ──────────────────────────────────────────────────

    def tick(self) -> None:
        """Advance one second. Called by the scheduler while running."""
        s = self.session
        if not s.is_running:
            return
        if s.seconds_remaining <= 1:
            self._complete()
            return
        duration = self.mode_duration_seconds
        s.progress = (s.seconds_remaining - 1) / duration * 100
        s.seconds_remaining -= 1
        self._elapsed_seconds += 1
        self._emit()

    def _complete(self) -> None:
        s = self.session
        self._cancel_tick()
        s.is_running = False
        s.seconds_remaining = 0
        if s.mode is TimerMode.FOCUS:
            s.completed_focus_count += 1
            s.total_focus_minutes += self.settings.focus_minutes
            logger.info("Focus session %d complete", s.completed_focus_count)
            self._notify(
                "Focus Session Complete!",
                f"Great job! You've completed {s.completed_focus_count} sessions today.",
            )
            next_mode = self._next_break_mode()
        else:
            logger.info("%s complete", s.mode.label)
            self._notify(f"{s.mode.label} Complete", "Time to focus again!")
            next_mode = TimerMode.FOCUS
        self._restart_mode(next_mode)
        self._emit()

    # ── Internals ─────────────────────────────────────────────

    def _next_break_mode(self) -> TimerMode:
        if self.session.completed_focus_count % self.settings.sessions_before_long_break == 0:
            return TimerMode.LONG_BREAK
        return TimerMode.SHORT_BREAK

    def _restart_mode(self, mode: TimerMode) -> None:
        self._cancel_tick()
        s = self.session
        s.mode = mode
        s.seconds_remaining = self.settings.duration_seconds(mode)
        s.is_running = False
        s.progress = 100.0
        self._elapsed_seconds = 0
        self._started = False

    def _cancel_tick(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
