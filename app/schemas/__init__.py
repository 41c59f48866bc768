from .habit import (
    COLOR_PALETTE,
    DEFAULT_COLOR,
    DEFAULT_REMINDER_TIME,
    Habit,
    HabitCreate,
    dump_habits,
    habits_to_json,
    parse_habits,
)

__all__ = [
    "COLOR_PALETTE",
    "DEFAULT_COLOR",
    "DEFAULT_REMINDER_TIME",
    "Habit",
    "HabitCreate",
    "dump_habits",
    "habits_to_json",
    "parse_habits",
]
