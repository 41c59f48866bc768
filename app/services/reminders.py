from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Iterable

from app.schemas.habit import Habit
from app.services.streaks import is_completed_today


def is_reminder_due(habit: Habit, local_now: datetime) -> bool:
    """Reminder fires on its exact minute, and only while the habit is still open today."""
    if not habit.reminder_time:
        return False
    if local_now.strftime("%H:%M") != habit.reminder_time:
        return False
    return not is_completed_today(habit, local_now)


def due_reminders(habits: Iterable[Habit], local_now: datetime) -> list[Habit]:
    return [h for h in habits if is_reminder_due(h, local_now)]


def reminder_text(habit: Habit) -> str:
    return f"🔔 Пора: {escape(habit.name)}\nОтметь выполнение командой /habits"
