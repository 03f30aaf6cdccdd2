"""
Domain events published after a date write has been committed.
"""
from dataclasses import dataclass
from typing import Optional
from app.schemas.date import DateResponse


@dataclass(frozen=True)
class DateEvent:
    """Base event; `after` is the committed state of the date."""
    date_id: int
    after: DateResponse


@dataclass(frozen=True)
class DateCreated(DateEvent):
    pass


@dataclass(frozen=True)
class DateUpdated(DateEvent):
    before: Optional[DateResponse] = None
