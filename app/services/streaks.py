from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Union

from app.schemas.habit import Habit
from app.utils.timezone_utils import day_key, to_day


DayLike = Union[date, datetime, str]
# A habit record or just its completion days
HabitDays = Union[Habit, Iterable[DayLike]]


def _completed_days(habit: HabitDays) -> set[date]:
    days = habit.completed_dates if isinstance(habit, Habit) else habit
    return {to_day(d) for d in days}


def is_completed_today(habit: HabitDays, today: DayLike) -> bool:
    """True if ``today`` is among the habit's completion days."""
    if isinstance(habit, Habit):
        return habit.is_done_on(day_key(today))
    return to_day(today) in _completed_days(habit)


def current_streak(habit: HabitDays, today: DayLike) -> int:
    """Consecutive completed days ending today, or yesterday while today is still open.

    Only the most recent run counts: once a day is missed the walk stops,
    whatever lies further back. Days after ``today`` are ignored.
    """
    today = to_day(today)
    days = sorted((d for d in _completed_days(habit) if d <= today), reverse=True)
    if not days:
        return 0

    gap = (today - days[0]).days
    if gap > 1:
        return 0

    # anchor on the latest completion: today, or yesterday when today is not marked yet
    cursor = days[0]
    streak = 0
    for day in days:
        if day != cursor:
            break
        streak += 1
        cursor -= timedelta(days=1)
    return streak


@dataclass(frozen=True)
class HabitSummary:
    """Figures shown on a habit card."""

    habit: Habit
    streak: int
    completed_today: bool
    total_completions: int

    @property
    def streak_label(self) -> str:
        return f"{self.streak} day" if self.streak == 1 else f"{self.streak} days"


def habit_summary(habit: Habit, today: DayLike) -> HabitSummary:
    return HabitSummary(
        habit=habit,
        streak=current_streak(habit, today),
        completed_today=is_completed_today(habit, today),
        total_completions=len(habit.completed_dates),
    )
