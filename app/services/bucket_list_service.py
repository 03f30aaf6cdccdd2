"""
Bucket list service for shared couple goals.
"""
from typing import List
import logging
from sqlalchemy.orm import Session
from app.core.exceptions import NotFoundError
from app.core.utils import utcnow
from app.models.bucket_list import BucketListItem
from app.schemas.bucket_list import BucketListItemCreate, BucketListItemUpdate
from app.services.couple_service import SessionContext

logger = logging.getLogger(__name__)


def create_item(session: SessionContext, data: BucketListItemCreate, db: Session) -> BucketListItem:
    """Add an item to the couple's bucket list."""
    item = BucketListItem(
        couple_code=session.couple_code,
        title=data.title,
        description=data.description,
        category=data.category,
        priority=data.priority,
        created_by=session.user_id,
        created_by_name=session.user_name,
        completed=False
    )
    db.add(item)
    db.commit()
    db.refresh(item)

    logger.info(f"Bucket list item {item.id} created by {session.user_id}")
    return item


def get_item(session: SessionContext, item_id: int, db: Session) -> BucketListItem:
    item = db.query(BucketListItem).filter(
        BucketListItem.id == item_id,
        BucketListItem.couple_code == session.couple_code
    ).first()
    if not item:
        raise NotFoundError(f"Bucket list item {item_id} not found")
    return item


def list_items(session: SessionContext, db: Session) -> List[BucketListItem]:
    """Newest first."""
    return db.query(BucketListItem).filter(
        BucketListItem.couple_code == session.couple_code
    ).order_by(BucketListItem.created_at.desc(), BucketListItem.id.desc()).all()


def update_item(session: SessionContext, item_id: int, updates: BucketListItemUpdate,
                db: Session) -> BucketListItem:
    item = get_item(session, item_id, db)
    for field, value in updates.model_dump(exclude_unset=True).items():
        if value is None and field != "description":
            continue
        setattr(item, field, value)
    item.updated_at = utcnow()
    db.commit()
    db.refresh(item)
    return item


def toggle_complete(session: SessionContext, item_id: int, completed: bool, db: Session) -> BucketListItem:
    """Mark done (recording who and when) or reopen."""
    item = get_item(session, item_id, db)
    item.completed = completed
    item.completed_at = utcnow() if completed else None
    item.completed_by = session.user_id if completed else None
    db.commit()
    db.refresh(item)
    return item


def delete_item(session: SessionContext, item_id: int, db: Session) -> None:
    item = get_item(session, item_id, db)
    db.delete(item)
    db.commit()


def active_items(items: List[BucketListItem]) -> List[BucketListItem]:
    return [item for item in items if not item.completed]


def completed_items(items: List[BucketListItem]) -> List[BucketListItem]:
    return [item for item in items if item.completed]
