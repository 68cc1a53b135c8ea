"""Progress statistics computed from study time records and tasks."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta

from core.dateutils import current_month_dates, current_week_dates, format_hours_minutes
from core.models import StatsSummary, StudyTimeRecord, Task


def _in_range(records: list[StudyTimeRecord], start: str, end: str) -> list[StudyTimeRecord]:
    return [r for r in records if start <= r.date <= end]


def weekly_records(records: list[StudyTimeRecord], today: date) -> list[StudyTimeRecord]:
    """Records in the Sunday-to-Saturday week containing *today*."""
    return _in_range(records, *current_week_dates(today))


def monthly_records(records: list[StudyTimeRecord], today: date) -> list[StudyTimeRecord]:
    return _in_range(records, *current_month_dates(today))


def today_study_time(records: list[StudyTimeRecord], today: date) -> str:
    day = today.isoformat()
    return format_hours_minutes(sum(r.duration for r in records if r.date == day))


def tasks_completed(tasks: list[Task]) -> str:
    done = sum(1 for t in tasks if t.completed)
    return f"{done}/{len(tasks)}"


def study_streak(records: list[StudyTimeRecord], today: date) -> int:
    """Consecutive study days ending today (or yesterday if nothing today)."""
    days = {r.date for r in records}
    if not days:
        return 0
    current = today if today.isoformat() in days else today - timedelta(days=1)
    streak = 0
    while current.isoformat() in days:
        streak += 1
        current -= timedelta(days=1)
    return streak


def average_focus_score(records: list[StudyTimeRecord]) -> str:
    """Mean of the non-zero focus scores as 'NN%', or 'N/A'."""
    scores = [r.focus_score for r in records if r.focus_score]
    if not scores:
        return "N/A"
    return f"{round(sum(scores) / len(scores))}%"


def weekly_task_completion(tasks: list[Task]) -> dict[str, int]:
    completed = sum(1 for t in tasks if t.completed)
    total = len(tasks)
    return {
        "completed": completed,
        "total": total,
        "percentage": round(completed / total * 100) if total else 0,
    }


def subject_distribution(records: list[StudyTimeRecord]) -> dict[int, int]:
    """Total minutes studied per subject id."""
    totals: dict[int, int] = defaultdict(int)
    for r in records:
        totals[r.subject_id] += r.duration
    return dict(totals)


def compile_stats(records: list[StudyTimeRecord], tasks: list[Task], today: date) -> StatsSummary:
    week_start, week_end = current_week_dates(today)
    return StatsSummary(
        today_study_time=today_study_time(records, today),
        tasks_completed=tasks_completed(tasks),
        streak=study_streak(records, today),
        focus_score=average_focus_score(records),
        weekly_task_completion=weekly_task_completion(tasks),
        subject_distribution=subject_distribution(records),
        week_start=week_start,
        week_end=week_end,
    )
