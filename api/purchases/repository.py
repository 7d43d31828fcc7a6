"""
Purchase persistence (raw SQL).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import asyncpg

from core import db

PURCHASE_COLUMNS = "id, ad_id, buyer_email, seller_email, price, created_at"


async def insert_purchase(
    *,
    ad_id: int,
    buyer_email: str,
    seller_email: str,
    price: Decimal,
    conn: asyncpg.Connection,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO purchases (ad_id, buyer_email, seller_email, price)
        VALUES ($1, $2, $3, $4)
        RETURNING {PURCHASE_COLUMNS}
        """,
        ad_id,
        buyer_email,
        seller_email,
        price,
        conn=conn,
    )
    if row is None:
        raise RuntimeError("Failed to insert purchase.")
    return row


async def list_by_buyer(email: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {PURCHASE_COLUMNS}
        FROM purchases
        WHERE lower(buyer_email) = lower($1)
        ORDER BY created_at DESC, id DESC
        """,
        email,
    )
