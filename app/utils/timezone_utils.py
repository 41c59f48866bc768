from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

import pytz


DAY_FORMAT = "%Y-%m-%d"

_UTC_OFFSET = re.compile(r"^UTC([+-])(\d{1,2})(?::(\d{2}))?$")


def parse_utc_offset(timezone_str: str) -> Optional[timedelta]:
    """
    Парсит строку формата UTC+3, UTC-5, UTC+5:30 и возвращает смещение.

    Returns:
        Смещение относительно UTC или None, если строка не в этом формате
    """
    match = _UTC_OFFSET.match(timezone_str)
    if not match:
        return None
    sign, hours, minutes = match.group(1), int(match.group(2)), int(match.group(3) or 0)
    if hours > 14 or minutes >= 60:
        return None
    offset = timedelta(hours=hours, minutes=minutes)
    return -offset if sign == "-" else offset


def validate_timezone(timezone_str: str) -> bool:
    """
    Проверяет, является ли строка валидным часовым поясом.
    Поддерживает как стандартные часовые пояса, так и формат UTC+3.
    """
    if parse_utc_offset(timezone_str) is not None:
        return True
    try:
        pytz.timezone(timezone_str)
        return True
    except pytz.exceptions.UnknownTimeZoneError:
        return False


def get_user_local_time(user_timezone: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Текущее локальное время пользователя.
    Если часовой пояс не указан или не распознан, возвращает UTC.
    """
    utc_now = now.astimezone(timezone.utc) if now is not None else datetime.now(timezone.utc)
    if not user_timezone:
        return utc_now

    offset = parse_utc_offset(user_timezone)
    if offset is not None:
        return utc_now.astimezone(timezone(offset))

    try:
        return utc_now.astimezone(pytz.timezone(user_timezone))
    except pytz.exceptions.UnknownTimeZoneError:
        return utc_now


def to_day(value: date | datetime | str) -> date:
    """Calendar day of a date, datetime or ``YYYY-MM-DD`` string (time of day dropped)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, DAY_FORMAT).date()


def day_key(value: date | datetime | str) -> str:
    """Normalized ``YYYY-MM-DD`` form used in stored records."""
    return to_day(value).strftime(DAY_FORMAT)


def local_today(user_timezone: Optional[str] = None) -> str:
    """Current local calendar day as ``YYYY-MM-DD``."""
    from app.config import settings

    tz = user_timezone if user_timezone is not None else settings.DEFAULT_TIMEZONE
    return get_user_local_time(tz).strftime(DAY_FORMAT)


def today_source(user_timezone: Optional[str] = None) -> Callable[[], str]:
    """Date source bound to a timezone, for injection into the habit store."""
    return lambda: local_today(user_timezone)
