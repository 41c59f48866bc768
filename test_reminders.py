#!/usr/bin/env python3
"""
Тесты напоминаний: какие привычки пора напомнить и отправка раз в день
"""

import asyncio
from datetime import datetime, timezone

from app.schemas.habit import Habit
from app.services.habit_store import HabitStore
from app.services.reminders import due_reminders, is_reminder_due, reminder_text
from app.utils.scheduler import HabitReminderScheduler


def habit(habit_id: str, reminder, *days: str) -> Habit:
    return Habit(id=habit_id, name=f"h{habit_id}", createdAt="2024-01-01",
                 completedDates=list(days), reminderTime=reminder)


NOW = datetime(2024, 1, 3, 9, 0, tzinfo=timezone.utc)


def test_due_only_on_matching_minute_and_when_open():
    habits = [
        habit("1", "09:00"),
        habit("2", "09:01"),
        habit("3", "09:00", "2024-01-03"),
        habit("4", None),
        habit("5", "09:00", "2024-01-02"),
    ]
    assert [h.id for h in due_reminders(habits, NOW)] == ["1", "5"]
    assert not is_reminder_due(habits[0], NOW.replace(second=59, minute=1))


def test_reminder_text_names_the_habit():
    assert "h1" in reminder_text(habit("1", "09:00"))


def make_scheduler(sent: list, tz=None) -> HabitReminderScheduler:
    store = HabitStore(today=lambda: "2024-01-03")
    store.create("Чтение", reminder_time="09:00")
    store.create("Бег", reminder_time="12:00")

    async def notify(h: Habit) -> None:
        sent.append(h.name)

    return HabitReminderScheduler(store, notify, tz)


def test_scheduler_sends_once_per_day():
    sent: list = []
    scheduler = make_scheduler(sent)
    assert asyncio.run(scheduler.check_reminders(NOW)) == 1
    assert asyncio.run(scheduler.check_reminders(NOW)) == 0
    assert sent == ["Чтение"]

    next_day = NOW.replace(day=4)
    assert asyncio.run(scheduler.check_reminders(next_day)) == 1
    assert sent == ["Чтение", "Чтение"]


def test_scheduler_uses_configured_timezone():
    sent: list = []
    scheduler = make_scheduler(sent, tz="UTC+3")
    # 09:00 UTC is 12:00 at UTC+3
    asyncio.run(scheduler.check_reminders(NOW))
    assert sent == ["Бег"]


def test_scheduler_skips_completed_and_survives_failing_notifier():
    store = HabitStore(today=lambda: "2024-01-03")
    done = store.create("Чтение", reminder_time="09:00")
    store.create("Бег", reminder_time="09:00")
    store.toggle_completion(done.id, "2024-01-03")

    async def notify(h: Habit) -> None:
        raise RuntimeError("telegram is down")

    scheduler = HabitReminderScheduler(store, notify)
    assert asyncio.run(scheduler.check_reminders(NOW)) == 0
    assert scheduler.sent_reminders == {}


def test_reminder_text_escapes_markup():
    store = HabitStore(today=lambda: "2024-01-03")
    text = reminder_text(store.create("Read <b", reminder_time="09:00"))
    assert "Read &lt;b" in text
    assert "<b" not in text


def test_scheduler_forgets_deleted_habits():
    sent: list = []
    scheduler = make_scheduler(sent)
    asyncio.run(scheduler.check_reminders(NOW))
    [reading] = [h for h in scheduler.store.list_habits() if h.name == "Чтение"]
    assert reading.id in scheduler.sent_reminders

    scheduler.store.delete(reading.id)
    asyncio.run(scheduler.check_reminders(NOW))
    assert scheduler.sent_reminders == {}
