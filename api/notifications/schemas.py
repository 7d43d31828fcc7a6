"""
Pydantic schemas for notification endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: int
    recipient_email: str
    message: str
    ad_id: int | None = None
    read: bool
    read_at: datetime | None = None
    created_at: datetime | None = None
