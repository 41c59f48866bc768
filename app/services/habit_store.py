from __future__ import annotations

import logging
import time
from datetime import date, datetime
from typing import Callable, Optional, Union

from pydantic import ValidationError

from app.schemas.habit import DEFAULT_COLOR, Habit, HabitCreate
from app.services.storage import HabitStorage
from app.utils.timezone_utils import day_key, local_today


logger = logging.getLogger(__name__)


class HabitStore:
    """Owns the habit collection and persists it after every committed change.

    Blank names, unknown ids and unreadable days are no-ops rather than
    errors. Persistence is best effort: a failed save is logged and the
    in-memory collection stays authoritative.
    """

    def __init__(
        self,
        storage: Optional[HabitStorage] = None,
        today: Optional[Callable[[], str]] = None,
        clock_ms: Optional[Callable[[], int]] = None,
    ):
        self.storage = storage
        self._today = today or local_today
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._habits: list[Habit] = []
        self._last_id = 0

    @classmethod
    def open(
        cls,
        storage: Optional[HabitStorage],
        today: Optional[Callable[[], str]] = None,
    ) -> HabitStore:
        """Create a store and adopt whatever the storage holds."""
        store = cls(storage, today=today)
        store.load()
        return store

    # --- lifecycle -------------------------------------------------------

    def load(self) -> None:
        """Replace the collection with the stored one, or start empty."""
        habits: Optional[list[Habit]] = None
        if self.storage is not None:
            try:
                habits = self.storage.load()
            except Exception:
                logger.exception("Habit storage failed on load, starting empty")
        self._habits = list(habits or [])
        self._last_id = max((int(h.id) for h in self._habits if h.id.isdecimal()), default=0)
        logger.info("Habit store ready with %d habits", len(self._habits))

    def _commit(self) -> None:
        if self.storage is None:
            return
        try:
            ok = self.storage.save(list(self._habits))
        except Exception:
            logger.exception("Habit storage failed on save")
            return
        if not ok:
            logger.warning("Habits were not saved; keeping in-memory state")

    # --- queries ---------------------------------------------------------

    def list_habits(self) -> list[Habit]:
        """Snapshot in insertion order."""
        return list(self._habits)

    def get(self, habit_id: str) -> Optional[Habit]:
        for habit in self._habits:
            if habit.id == habit_id:
                return habit
        return None

    def today(self) -> str:
        return self._today()

    # --- mutations -------------------------------------------------------

    def _next_id(self) -> str:
        # millisecond timestamps, bumped past anything already handed out or loaded
        candidate = max(self._clock_ms(), self._last_id + 1)
        taken = {h.id for h in self._habits}
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def create(
        self,
        name: str,
        color: str = DEFAULT_COLOR,
        reminder_time: Optional[str] = None,
    ) -> Optional[Habit]:
        try:
            data = HabitCreate(name=name, color=color, reminder_time=reminder_time)
        except ValidationError as e:
            logger.debug("Habit not created: %s", e)
            return None

        habit = Habit(
            id=self._next_id(),
            name=data.name,
            color=data.color,
            created_at=self._today(),
            completed_dates=(),
            reminder_time=data.reminder_time,
        )
        self._habits.append(habit)
        logger.info("Created habit %s (%s)", habit.id, habit.name)
        self._commit()
        return habit

    def delete(self, habit_id: str) -> None:
        remaining = [h for h in self._habits if h.id != habit_id]
        if len(remaining) == len(self._habits):
            return
        self._habits = remaining
        logger.info("Deleted habit %s", habit_id)
        self._commit()

    def toggle_completion(
        self,
        habit_id: str,
        day: Union[date, datetime, str, None] = None,
    ) -> None:
        """Mark ``day`` (default: today) done, or un-mark it if it already is."""
        try:
            key = day_key(day if day is not None else self._today())
        except (TypeError, ValueError):
            logger.warning("Ignoring toggle for habit %s: bad day %r", habit_id, day)
            return

        for index, habit in enumerate(self._habits):
            if habit.id != habit_id:
                continue
            days = set(habit.completed_dates)
            if key in days:
                days.discard(key)
            else:
                days.add(key)
            self._habits[index] = habit.model_copy(update={"completed_dates": tuple(sorted(days))})
            logger.debug("Habit %s %s on %s", habit_id, "done" if key in days else "undone", key)
            self._commit()
            return

    def toggle_today(self, habit_id: str) -> None:
        self.toggle_completion(habit_id, self._today())
