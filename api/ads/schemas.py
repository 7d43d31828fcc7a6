"""
Pydantic schemas for ad endpoints.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class AdWriteRequest(BaseModel):
    brand: str = Field(..., min_length=1, max_length=100)
    size: str = Field(..., min_length=1, max_length=20)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class AdCreateRequest(AdWriteRequest):
    pass


class AdUpdateRequest(AdWriteRequest):
    pass


class AdResponse(BaseModel):
    id: int
    owner_email: str
    brand: str
    size: str
    price: Decimal
    sold: bool
    image_path: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
