"""
Domain exceptions raised by services and translated to HTTP errors by routes.
"""


class SoulSyncError(Exception):
    """Base class for domain errors."""


class NotFoundError(SoulSyncError):
    """A couple, member, date or other record does not exist for the caller."""


class InvalidStateTransition(SoulSyncError):
    """Operation attempted on a date in the wrong lifecycle state."""

    def __init__(self, date_id: int, current: str, attempted: str):
        self.date_id = date_id
        self.current = current
        self.attempted = attempted
        super().__init__(f"Date {date_id} cannot move from '{current}' to '{attempted}'")


class PermissionDenied(SoulSyncError):
    """Caller is a couple member but may not perform this operation."""


class CoupleFull(SoulSyncError):
    """Couple already has two members."""


class MissingCredential(SoulSyncError):
    """Push token or provider credential is not configured. Never surfaced to users."""


class DeliveryFailure(SoulSyncError):
    """Provider-level send error for push or email."""
