"""
Bucket list routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.core.exceptions import SoulSyncError
from app.schemas.bucket_list import (
    BucketListItemCreate, BucketListItemUpdate, BucketListToggle, BucketListItemResponse
)
from app.services import bucket_list_service
from app.services.couple_service import SessionContext
from app.api.dependencies import get_current_session, to_http_error

router = APIRouter(prefix="/bucket-list", tags=["bucket-list"])


@router.get("", response_model=List[BucketListItemResponse])
async def list_items(
    view: str = Query("all", description="all, active or completed"),
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """List bucket list items, newest first."""
    items = bucket_list_service.list_items(session, db)
    if view == "active":
        return bucket_list_service.active_items(items)
    if view == "completed":
        return bucket_list_service.completed_items(items)
    if view != "all":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown view '{view}'"
        )
    return items


@router.post("", response_model=BucketListItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    item_data: BucketListItemCreate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Add a bucket list item."""
    return bucket_list_service.create_item(session, item_data, db)


@router.patch("/{item_id}", response_model=BucketListItemResponse)
async def update_item(
    item_id: int,
    updates: BucketListItemUpdate,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Update a bucket list item."""
    try:
        return bucket_list_service.update_item(session, item_id, updates, db)
    except SoulSyncError as e:
        raise to_http_error(e)


@router.post("/{item_id}/toggle", response_model=BucketListItemResponse)
async def toggle_item(
    item_id: int,
    toggle: BucketListToggle,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Mark an item done or reopen it."""
    try:
        return bucket_list_service.toggle_complete(session, item_id, toggle.completed, db)
    except SoulSyncError as e:
        raise to_http_error(e)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: int,
    session: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Delete a bucket list item."""
    try:
        bucket_list_service.delete_item(session, item_id, db)
    except SoulSyncError as e:
        raise to_http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
