from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """Declarative base; table name is the lower-cased class name."""

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
