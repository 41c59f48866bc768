from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

from app.config import Settings
from app.schemas.habit import Habit, dump_habits, habits_to_json, parse_habits


logger = logging.getLogger(__name__)


@runtime_checkable
class HabitStorage(Protocol):
    """Key-value persistence for the whole habit collection.

    ``load`` returns None when nothing usable is stored; ``save`` reports
    success with a bool and never raises.
    """

    def load(self) -> Optional[list[Habit]]: ...

    def save(self, habits: Sequence[Habit]) -> bool: ...


class MemoryStorage:
    """Process-local blob store; keeps the serialized text like a browser's localStorage."""

    def __init__(self, key: str = "habits", blobs: Optional[dict[str, str]] = None):
        self.key = key
        self.blobs: dict[str, str] = blobs if blobs is not None else {}

    def load(self) -> Optional[list[Habit]]:
        raw = self.blobs.get(self.key)
        if raw is None:
            return None
        try:
            return parse_habits(raw)
        except ValueError as e:
            logger.warning("Stored habits under %r are unreadable: %s", self.key, e)
            return None

    def save(self, habits: Sequence[Habit]) -> bool:
        self.blobs[self.key] = habits_to_json(habits)
        return True


class JsonFileStorage:
    """Habits kept under one key of a JSON object file.

    Other keys in the file are left as they are. Writes go through a temp
    file and ``os.replace`` so a crash never leaves a half-written file.
    """

    def __init__(self, path: Path | str, key: str = "habits"):
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> dict:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return data

    def load(self) -> Optional[list[Habit]]:
        if not self.path.exists():
            logger.info("Habit file %s not found, starting empty", self.path)
            return None
        try:
            document = self._read_document()
            if self.key not in document:
                return None
            habits = parse_habits(document[self.key])
        except (OSError, ValueError) as e:
            logger.warning("Could not load habits from %s: %s", self.path, e)
            return None
        logger.info("Loaded %d habits from %s", len(habits), self.path)
        return habits

    def save(self, habits: Sequence[Habit]) -> bool:
        document: dict = {}
        if self.path.exists():
            try:
                document = self._read_document()
            except (OSError, ValueError) as e:
                logger.warning("Overwriting unreadable habit file %s: %s", self.path, e)
        document[self.key] = dump_habits(habits)

        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error("Failed to save habits to %s: %s", self.path, e)
            return False
        return True


def get_storage(config: Settings) -> HabitStorage:
    """Build the persistence backend selected by ``STORAGE_BACKEND``."""
    if config.STORAGE_BACKEND == "sql":
        from app.db.storage import SqlHabitStorage

        return SqlHabitStorage.from_url(config.DATABASE_URL, key=config.STORAGE_KEY)
    return JsonFileStorage(config.DATA_FILE, key=config.STORAGE_KEY)
