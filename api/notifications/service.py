"""
Notification business logic.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from . import repository, schemas


def sold_message(ad_row: dict) -> str:
    return f'Your ad "{ad_row["brand"]}" (size {ad_row["size"]}) was sold for {ad_row["price"]}.'


def to_notification_response(row: dict) -> schemas.NotificationResponse:
    return schemas.NotificationResponse(
        id=int(row["id"]),
        recipient_email=str(row["recipient_email"]),
        message=str(row["message"]),
        ad_id=row.get("ad_id"),
        read=row.get("read_at") is not None,
        read_at=row.get("read_at"),
        created_at=row.get("created_at"),
    )


async def list_notifications(email: str, *, include_read: bool = False) -> list[schemas.NotificationResponse]:
    rows = await repository.list_for_recipient(email, include_read=include_read)
    return [to_notification_response(row) for row in rows]


async def mark_read(notification_id: int, *, email: str) -> schemas.NotificationResponse:
    row = await repository.mark_read(notification_id, email=email)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found.")
    return to_notification_response(row)
