from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from app.services.streaks import HabitSummary


def habits_keyboard(summaries: Sequence[HabitSummary]) -> InlineKeyboardMarkup:
    """Per habit: toggle today's mark and delete."""
    rows = []
    for s in summaries:
        label = "✅ Выполнено сегодня" if s.completed_today else "Отметить"
        rows.append(
            [
                InlineKeyboardButton(text=f"{label}: {s.habit.name}", callback_data=f"habit_toggle:{s.habit.id}"),
                InlineKeyboardButton(text="🗑", callback_data=f"habit_delete:{s.habit.id}"),
            ]
        )
    rows.append([InlineKeyboardButton(text="🔄 Обновить", callback_data="habits_list")])
    return InlineKeyboardMarkup(inline_keyboard=rows)
