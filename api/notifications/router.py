"""
FastAPI router for seller notifications.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/notifications", response_model=list[schemas.NotificationResponse])
async def list_notifications(
    include_read: bool = Query(False),
    email: str = Depends(auth_dependencies.get_current_email),
) -> list[schemas.NotificationResponse]:
    """
    Unread notifications for the caller, newest first.
    """
    return await service.list_notifications(email, include_read=include_read)


@router.post("/notifications/{notification_id}/read", response_model=schemas.NotificationResponse)
async def mark_read(
    notification_id: int,
    email: str = Depends(auth_dependencies.get_current_email),
) -> schemas.NotificationResponse:
    return await service.mark_read(notification_id, email=email)
