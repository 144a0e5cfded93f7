from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    # column defaults are python-side so the schema stays portable (postgres / sqlite)
    return datetime.now(timezone.utc)
