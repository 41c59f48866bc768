from __future__ import annotations

from html import escape
from typing import Sequence

from app.services.streaks import HabitSummary


# Telegram has no colors in text: map the palette to the closest emoji
COLOR_EMOJI = {
    "#3b82f6": "🔵",
    "#ef4444": "🔴",
    "#10b981": "🟢",
    "#f59e0b": "🟡",
    "#8b5cf6": "🟣",
    "#ec4899": "🩷",
    "#14b8a6": "🩵",
    "#f97316": "🟠",
}


def color_badge(color: str) -> str:
    return COLOR_EMOJI.get(color.lower(), "⚪")


def format_habit_card(summary: HabitSummary) -> str:
    """Одна строка привычки: цвет, название, серия, напоминание, всего выполнений."""
    habit = summary.habit
    parts = [f"{color_badge(habit.color)} <b>{escape(habit.name)}</b>"]
    if summary.streak > 0:
        parts.append(f"🔥 {summary.streak_label}")
    if habit.reminder_time:
        parts.append(f"🔔 {habit.reminder_time}")
    parts.append(f"{summary.total_completions} total")
    status = "✅" if summary.completed_today else "⬜"
    return f"{status} " + " · ".join(parts)


def format_habit_list(summaries: Sequence[HabitSummary], today: str) -> str:
    if not summaries:
        return "📅 Привычек пока нет. Добавь первую: /add Название [#цвет] [ЧЧ:ММ]"
    lines = [f"📅 <b>{today}</b>", ""]
    lines.extend(format_habit_card(s) for s in summaries)
    return "\n".join(lines)
