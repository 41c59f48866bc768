#!/usr/bin/env python3
"""
Тесты разбора команды /add и форматирования списка привычек
"""

from app.handlers.habits import parse_add_command, render_habits
from app.schemas.habit import DEFAULT_COLOR, DEFAULT_REMINDER_TIME
from app.services.habit_store import HabitStore
from app.services.storage import MemoryStorage
from app.services.streaks import habit_summary
from app.utils.text_formatter import format_habit_card, format_habit_list


def test_parse_name_only_uses_defaults():
    assert parse_add_command("Читать 20 страниц") == ("Читать 20 страниц", DEFAULT_COLOR, DEFAULT_REMINDER_TIME)


def test_parse_color_and_time_in_any_order():
    assert parse_add_command("Бег #EF4444 7:05") == ("Бег", "#ef4444", "07:05")
    assert parse_add_command("Бег 21:00 #10b981") == ("Бег", "#10b981", "21:00")


def test_parse_without_reminder():
    assert parse_add_command("Йога -") == ("Йога", DEFAULT_COLOR, None)


def test_parse_empty_payload():
    name, _, _ = parse_add_command("   ")
    assert name == ""


def test_card_shows_streak_reminder_and_total():
    store = HabitStore(today=lambda: "2024-01-03")
    habit = store.create("Чтение <книги>", "#ef4444", "21:00")
    store.toggle_completion(habit.id, "2024-01-02")
    store.toggle_completion(habit.id, "2024-01-03")

    card = format_habit_card(habit_summary(store.get(habit.id), "2024-01-03"))
    assert card.startswith("✅ 🔴")
    assert "&lt;книги&gt;" in card
    assert "🔥 2 days" in card
    assert "🔔 21:00" in card
    assert "2 total" in card


def test_card_without_streak_or_reminder():
    store = HabitStore(today=lambda: "2024-01-03")
    habit = store.create("Бег", "#123456")
    card = format_habit_card(habit_summary(habit, "2024-01-03"))
    assert card.startswith("⬜ ⚪")
    assert "🔥" not in card
    assert "🔔" not in card


def test_render_habits_builds_keyboard_rows():
    store = HabitStore(today=lambda: "2024-01-03")
    assert "Привычек пока нет" in format_habit_list([], "2024-01-03")

    a = store.create("Чтение")
    store.create("Бег")
    text, keyboard = render_habits(store)
    assert "2024-01-03" in text
    assert len(keyboard.inline_keyboard) == 3
    assert keyboard.inline_keyboard[0][0].callback_data == f"habit_toggle:{a.id}"
    assert keyboard.inline_keyboard[0][1].callback_data == f"habit_delete:{a.id}"


def test_out_of_range_time_stays_in_name():
    assert parse_add_command("Бег 25:00") == ("Бег 25:00", DEFAULT_COLOR, DEFAULT_REMINDER_TIME)
    assert parse_add_command("Бег 9:99") == ("Бег 9:99", DEFAULT_COLOR, DEFAULT_REMINDER_TIME)
    assert parse_add_command("Бег 23:59") == ("Бег", DEFAULT_COLOR, "23:59")


def test_stored_habit_with_unreadable_day_is_not_adopted():
    """Повреждённые данные: список открывается пустым и рисуется без ошибок"""
    storage = MemoryStorage(blobs={
        "habits": '[{"id": "1", "name": "a", "createdAt": "2024-01-01", '
                  '"completedDates": ["2024-01-03T10:00:00"]}]'
    })
    store = HabitStore.open(storage, today=lambda: "2024-01-03")
    assert store.list_habits() == []

    text, keyboard = render_habits(store)
    assert "Привычек пока нет" in text
    assert len(keyboard.inline_keyboard) == 1
