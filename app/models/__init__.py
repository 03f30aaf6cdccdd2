"""Models package - Import all models for SQLAlchemy registration."""
from app.models.couple import Couple, CoupleMember, MAX_COUPLE_MEMBERS
from app.models.date import Date, DateStatus, RequestStatus, DateType
from app.models.bucket_list import BucketListItem, BucketCategory, BucketPriority
from app.models.mood import MoodEntry, Mood
from app.models.lease import SchedulerLease

__all__ = [
    "Couple",
    "CoupleMember",
    "MAX_COUPLE_MEMBERS",
    "Date",
    "DateStatus",
    "RequestStatus",
    "DateType",
    "BucketListItem",
    "BucketCategory",
    "BucketPriority",
    "MoodEntry",
    "Mood",
    "SchedulerLease",
]
