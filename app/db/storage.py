from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.schemas.habit import Habit, habits_to_json, parse_habits

from .models import KeyValue
from .session import build_engine, create_all, make_session_factory, session_scope


logger = logging.getLogger(__name__)


class SqlHabitStorage:
    """Habit collection stored as one JSON blob in the ``keyvalue`` table."""

    def __init__(self, session_factory: sessionmaker[Session], key: str = "habits"):
        self.session_factory = session_factory
        self.key = key

    @classmethod
    def from_engine(cls, engine: Engine, key: str = "habits") -> SqlHabitStorage:
        create_all(engine)
        return cls(make_session_factory(engine), key=key)

    @classmethod
    def from_url(cls, database_url: str, key: str = "habits") -> SqlHabitStorage:
        return cls.from_engine(build_engine(database_url), key=key)

    def load(self) -> Optional[list[Habit]]:
        try:
            with session_scope(self.session_factory) as session:
                row = session.get(KeyValue, self.key)
                raw = row.value if row is not None else None
        except SQLAlchemyError as e:
            logger.warning("Could not read habits from database: %s", e)
            return None
        if raw is None:
            return None
        try:
            habits = parse_habits(raw)
        except ValueError as e:
            logger.warning("Stored habits under %r are unreadable: %s", self.key, e)
            return None
        logger.info("Loaded %d habits from database", len(habits))
        return habits

    def save(self, habits: Sequence[Habit]) -> bool:
        payload = habits_to_json(habits)
        try:
            with session_scope(self.session_factory) as session:
                row = session.get(KeyValue, self.key)
                if row is None:
                    session.add(KeyValue(key=self.key, value=payload))
                else:
                    row.value = payload
        except SQLAlchemyError as e:
            logger.error("Failed to save habits to database: %s", e)
            return False
        return True
