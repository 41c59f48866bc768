from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


COLOR_PALETTE: tuple[str, ...] = (
    "#3b82f6",
    "#ef4444",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
    "#14b8a6",
    "#f97316",
)
DEFAULT_COLOR = COLOR_PALETTE[0]
DEFAULT_REMINDER_TIME = "09:00"

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

_DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _check_day(value) -> str:
    """Stored days are exactly ``YYYY-MM-DD`` and a real calendar date."""
    if not isinstance(value, str) or not _DAY_PATTERN.match(value):
        raise ValueError(f"not a YYYY-MM-DD day: {value!r}")
    datetime.strptime(value, "%Y-%m-%d")
    return value


class HabitCreate(BaseModel):
    """User input for a new habit; the name is trimmed before the emptiness check."""

    name: str = Field(min_length=1)
    color: str = Field(default=DEFAULT_COLOR, min_length=1)
    reminder_time: Optional[str] = Field(default=None, pattern=_TIME_PATTERN)

    @field_validator("name", "color", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("reminder_time", mode="before")
    @classmethod
    def _blank_reminder(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class Habit(BaseModel):
    """Stored habit record.

    Field aliases are the on-disk names (``createdAt``, ``completedDates``,
    ``reminderTime``). Instances are frozen: the store replaces a record on
    every change, so a snapshot handed out never moves under the caller.
    """

    id: str
    name: str
    color: str = DEFAULT_COLOR
    created_at: str = Field(alias="createdAt")
    completed_dates: tuple[str, ...] = Field(default=(), alias="completedDates")
    reminder_time: Optional[str] = Field(default=None, alias="reminderTime")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("completed_dates", mode="before")
    @classmethod
    def _unique_days(cls, v):
        # one entry per day, kept sorted so the stored blob is stable
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(sorted({_check_day(d) for d in v}))
        return v

    @field_validator("created_at")
    @classmethod
    def _created_day(cls, v: str) -> str:
        return _check_day(v)

    def is_done_on(self, day: str) -> bool:
        return day in self.completed_dates


_HABIT_LIST = TypeAdapter(list[Habit])


def dump_habits(habits: Iterable[Habit]) -> list[dict]:
    """Serialize habits to plain dicts with the stored field names."""
    return [h.model_dump(mode="json", by_alias=True, exclude_none=True) for h in habits]


def habits_to_json(habits: Sequence[Habit]) -> str:
    return json.dumps(dump_habits(habits), ensure_ascii=False)


def parse_habits(raw) -> list[Habit]:
    """Parse a stored collection (JSON text or already decoded list).

    Raises ``ValueError`` (``pydantic.ValidationError`` included) on anything
    that is not a list of habit records.
    """
    if isinstance(raw, (str, bytes)):
        return _HABIT_LIST.validate_json(raw)
    return _HABIT_LIST.validate_python(raw)
