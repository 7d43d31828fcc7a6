"""
Notification persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db

NOTIFICATION_COLUMNS = "id, recipient_email, message, ad_id, read_at, created_at"


async def create_notification(
    *,
    recipient_email: str,
    message: str,
    ad_id: int | None = None,
    conn: asyncpg.Connection | None = None,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO notifications (recipient_email, message, ad_id)
        VALUES ($1, $2, $3)
        RETURNING {NOTIFICATION_COLUMNS}
        """,
        recipient_email,
        message,
        ad_id,
        conn=conn,
    )
    if row is None:
        raise RuntimeError("Failed to create notification.")
    return row


async def list_for_recipient(email: str, *, include_read: bool = False) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {NOTIFICATION_COLUMNS}
        FROM notifications
        WHERE lower(recipient_email) = lower($1)
          AND ($2 OR read_at IS NULL)
        ORDER BY created_at DESC, id DESC
        """,
        email,
        include_read,
    )


async def mark_read(notification_id: int, *, email: str) -> dict[str, Any] | None:
    """
    Mark a notification as read. Returns None when it isn't the caller's.
    """
    return await db.fetch_one(
        f"""
        UPDATE notifications
        SET read_at = COALESCE(read_at, now())
        WHERE id = $1
          AND lower(recipient_email) = lower($2)
        RETURNING {NOTIFICATION_COLUMNS}
        """,
        notification_id,
        email,
    )
