"""
Pydantic schemas for purchase endpoints.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CheckoutRequest(BaseModel):
    # Clients send `adIds`; `ad_ids` is accepted too.
    model_config = ConfigDict(populate_by_name=True)

    ad_ids: list[int] = Field(..., alias="adIds", min_length=1, max_length=100)


class PurchaseResponse(BaseModel):
    id: int
    ad_id: int
    buyer_email: str
    seller_email: str
    price: Decimal
    created_at: datetime | None = None


class CheckoutResponse(BaseModel):
    purchases: list[PurchaseResponse]
    count: int
    total: Decimal
