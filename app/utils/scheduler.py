from __future__ import annotations

import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.schemas.habit import Habit
from app.services.habit_store import HabitStore
from app.services.reminders import due_reminders
from app.utils.timezone_utils import DAY_FORMAT, get_user_local_time


logger = logging.getLogger(__name__)

Notifier = Callable[[Habit], Awaitable[None]]


class HabitReminderScheduler:
    """Wrapper around APScheduler: checks habit reminder times once a minute."""

    def __init__(self, store: HabitStore, notify: Notifier, user_timezone: Optional[str] = None):
        self.scheduler = AsyncIOScheduler(timezone="UTC")
        self.store = store
        self.notify = notify
        self.user_timezone = user_timezone
        # {habit_id: last_sent_date}
        self.sent_reminders: Dict[str, str] = {}

    def _is_reminder_sent_today(self, habit_id: str, today: str) -> bool:
        return self.sent_reminders.get(habit_id) == today

    def _mark_reminder_sent(self, habit_id: str, today: str) -> None:
        self.sent_reminders[habit_id] = today

    def start(self) -> None:
        self.scheduler.add_job(self.check_reminders, IntervalTrigger(minutes=1), id="habit_reminders")
        self.scheduler.start()
        logger.info("Reminder scheduler started (timezone %s)", self.user_timezone or "UTC")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    async def check_reminders(self, now: Optional[datetime] = None) -> int:
        """Send every reminder due at this minute; returns how many were sent."""
        local_now = get_user_local_time(self.user_timezone, now)
        today = local_now.strftime(DAY_FORMAT)
        habits = self.store.list_habits()
        # забываем удалённые привычки
        live_ids = {h.id for h in habits}
        for habit_id in [k for k in self.sent_reminders if k not in live_ids]:
            del self.sent_reminders[habit_id]

        sent = 0
        for habit in due_reminders(habits, local_now):
            if self._is_reminder_sent_today(habit.id, today):
                continue
            try:
                await self.notify(habit)
            except Exception:
                logger.exception("Failed to send reminder for habit %s", habit.id)
                continue
            self._mark_reminder_sent(habit.id, today)
            sent += 1
        return sent
