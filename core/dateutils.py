"""Date and duration formatting helpers."""

from __future__ import annotations

import calendar
from datetime import date, timedelta


def format_clock(seconds: int) -> str:
    """Render seconds as MM:SS."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


def format_hours_minutes(total_minutes: int) -> str:
    """'1h 30m', '2h', '45m'."""
    hours, minutes = divmod(int(total_minutes), 60)
    if hours > 0:
        return f"{hours}h {minutes}m" if minutes else f"{hours}h"
    return f"{minutes}m"


def format_time_to_display_time(time_str: str) -> str:
    """Convert 24h 'HH:MM' to '2:30 PM'."""
    hours, minutes = time_str.split(":")
    hour = int(hours)
    period = "PM" if hour >= 12 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minutes} {period}"


def calculate_duration(start_time: str, end_time: str) -> str:
    """Duration between two 'HH:MM' strings; end before start wraps past midnight."""
    sh, sm = (int(x) for x in start_time.split(":"))
    eh, em = (int(x) for x in end_time.split(":"))
    duration = (eh * 60 + em) - (sh * 60 + sm)
    if duration < 0:
        duration += 24 * 60
    return format_hours_minutes(duration)


def days_left(due_date: str, today: date) -> int:
    """Whole days until *due_date*, never negative."""
    return max(0, (date.fromisoformat(due_date) - today).days)


def format_due_date(due_date: str, today: date) -> str:
    due = date.fromisoformat(due_date)
    if due == today:
        return "Today"
    if due == today + timedelta(days=1):
        return "Tomorrow"
    return f"{calendar.month_abbr[due.month]} {due.day}"


def current_week_dates(today: date) -> tuple[str, str]:
    """Sunday..Saturday week containing *today*, as ISO strings."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    end = start + timedelta(days=6)
    return start.isoformat(), end.isoformat()


def current_month_dates(today: date) -> tuple[str, str]:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1).isoformat(), today.replace(day=last_day).isoformat()
