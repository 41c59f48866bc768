from __future__ import annotations

import re
from html import escape
from typing import Optional

from aiogram import F, Router, types
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject, CommandStart

from app.config import settings
from app.keyboards.common import habits_keyboard
from app.schemas.habit import DEFAULT_COLOR, DEFAULT_REMINDER_TIME
from app.services.habit_store import HabitStore
from app.services.streaks import habit_summary
from app.utils.text_formatter import format_habit_list

router = Router()

_COLOR_TOKEN = re.compile(r"^#[0-9a-fA-F]{3}([0-9a-fA-F]{3})?$")
_TIME_TOKEN = re.compile(r"^([01]?\d|2[0-3]):[0-5]\d$")
_NO_REMINDER = {"-", "off", "нет"}

HELP_TEXT = (
    "Трекер привычек\n\n"
    "/add Название [#цвет] [ЧЧ:ММ|-] - новая привычка (напоминание по умолчанию 09:00, '-' без напоминания)\n"
    "/habits - список, отметка за сегодня и удаление\n"
    "/help - эта подсказка"
)


def parse_add_command(payload: str) -> tuple[str, str, Optional[str]]:
    """Split '/add' arguments into name, color and reminder time.

    Color and time are optional trailing tokens in any order; everything
    before them is the name.
    """
    tokens = payload.split()
    color = DEFAULT_COLOR
    reminder: Optional[str] = DEFAULT_REMINDER_TIME
    while tokens:
        last = tokens[-1]
        if _COLOR_TOKEN.match(last):
            color = last.lower()
        elif _TIME_TOKEN.match(last):
            hours, minutes = last.split(":")
            reminder = f"{int(hours):02d}:{minutes}"
        elif last.lower() in _NO_REMINDER:
            reminder = None
        else:
            break
        tokens.pop()
    return " ".join(tokens), color, reminder


def render_habits(store: HabitStore) -> tuple[str, types.InlineKeyboardMarkup]:
    today = store.today()
    summaries = [habit_summary(h, today) for h in store.list_habits()]
    return format_habit_list(summaries, today), habits_keyboard(summaries)


@router.message(CommandStart())
@router.message(Command("help"))
async def start_handler(message: types.Message) -> None:
    await message.answer(HELP_TEXT)


@router.message(Command("add"))
async def add_habit(message: types.Message, command: CommandObject, store: HabitStore) -> None:
    """Новая привычка: /add Название [#цвет] [ЧЧ:ММ]."""
    name, color, reminder = parse_add_command(command.args or "")
    habit = store.create(name, color=color, reminder_time=reminder)
    if habit is None:
        await message.answer("Использование: /add Название [#цвет] [ЧЧ:ММ]\nНазвание не может быть пустым.")
        return

    text, keyboard = render_habits(store)
    await message.answer(f"Привычка «{escape(habit.name)}» добавлена ✅\n\n{text}", reply_markup=keyboard)

    # первая привычка: сообщаем, как работают напоминания
    if len(store.list_habits()) == 1:
        if settings.OWNER_CHAT_ID:
            await message.answer(f"🔔 Напоминания приходят в этот чат (часовой пояс {settings.DEFAULT_TIMEZONE}).")
        else:
            await message.answer("🔕 Напоминания выключены: задайте OWNER_CHAT_ID, чтобы их получать.")


@router.message(Command("habits"))
async def list_habits(message: types.Message, store: HabitStore) -> None:
    text, keyboard = render_habits(store)
    await message.answer(text, reply_markup=keyboard)


@router.callback_query(F.data == "habits_list")
async def refresh_habits(cb: types.CallbackQuery, store: HabitStore) -> None:
    await _rerender(cb, store)
    await cb.answer()


@router.callback_query(F.data.startswith("habit_toggle:"))
async def toggle_habit(cb: types.CallbackQuery, store: HabitStore) -> None:
    habit_id = cb.data.split(":", 1)[1]
    store.toggle_today(habit_id)
    await _rerender(cb, store)
    habit = store.get(habit_id)
    if habit is None:
        await cb.answer("Привычка не найдена")
    elif habit.is_done_on(store.today()):
        await cb.answer("Отмечено ✅")
    else:
        await cb.answer("Отметка снята")


@router.callback_query(F.data.startswith("habit_delete:"))
async def delete_habit(cb: types.CallbackQuery, store: HabitStore) -> None:
    store.delete(cb.data.split(":", 1)[1])
    await _rerender(cb, store)
    await cb.answer("Удалено 🗑")


async def _rerender(cb: types.CallbackQuery, store: HabitStore) -> None:
    if not isinstance(cb.message, types.Message):
        return
    text, keyboard = render_habits(store)
    try:
        await cb.message.edit_text(text, reply_markup=keyboard)
    except TelegramBadRequest as e:
        if "message is not modified" not in str(e):
            raise
