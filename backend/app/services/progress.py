"""
Progress Service
================
Builds the progress screen from the stored profile and recent history.

The weekly chart sums workout minutes per day for the current week,
Monday to Sunday, bucketed by the UTC date of ``completed_at``. Days with
no workouts show 0.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from app.models.profile import (
    ProgressResponse,
    UserProfile,
    WeeklyChartPoint,
    WorkoutHistoryRecord,
)

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def weekly_minutes(
    history: list[WorkoutHistoryRecord],
    today: Optional[date] = None,
) -> list[WeeklyChartPoint]:
    today = today or datetime.now(timezone.utc).date()
    week_start = today - timedelta(days=today.weekday())
    days = [week_start + timedelta(days=i) for i in range(7)]

    totals: dict[date, int] = {d: 0 for d in days}
    for record in history:
        completed = record.completed_at
        if completed.tzinfo is not None:
            completed = completed.astimezone(timezone.utc)
        day = completed.date()
        if day in totals:
            totals[day] += record.duration

    return [
        WeeklyChartPoint(day=label, date=d, minutes=totals[d])
        for label, d in zip(WEEKDAY_LABELS, days)
    ]


def build_progress(
    profile: UserProfile,
    history: list[WorkoutHistoryRecord],
    today: Optional[date] = None,
) -> ProgressResponse:
    return ProgressResponse(
        streak=profile.streak,
        total_workouts=profile.total_workouts,
        total_minutes=profile.total_time,
        total_hours=profile.total_time // 60,
        weekly=weekly_minutes(history, today),
        history=history,
    )
