"""
Lease model used to keep scheduled jobs from overlapping across processes.
"""
from sqlalchemy import Column, String, DateTime
from app.db.base import Base


class SchedulerLease(Base):
    """Named lease held by one scheduler process until expires_at."""
    __tablename__ = "scheduler_leases"

    name = Column(String(64), primary_key=True)
    holder = Column(String(128), nullable=False)
    expires_at = Column(DateTime, nullable=False)
