"""
Ad persistence (raw SQL).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import asyncpg

from core import db

AD_COLUMNS = "id, owner_email, brand, size, price, sold, image_path, created_at, updated_at"


async def list_unsold_ads(*, limit: int = 100, offset: int = 0) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {AD_COLUMNS}
        FROM ads
        WHERE sold = false
        ORDER BY created_at DESC, id DESC
        LIMIT $1
        OFFSET $2
        """,
        limit,
        offset,
    )


async def list_ads_by_owner(owner_email: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {AD_COLUMNS}
        FROM ads
        WHERE lower(owner_email) = lower($1)
        ORDER BY created_at DESC, id DESC
        """,
        owner_email,
    )


async def get_ad(ad_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {AD_COLUMNS}
        FROM ads
        WHERE id = $1
        """,
        ad_id,
    )


async def create_ad(*, owner_email: str, brand: str, size: str, price: Decimal) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO ads (owner_email, brand, size, price)
        VALUES ($1, $2, $3, $4)
        RETURNING {AD_COLUMNS}
        """,
        owner_email,
        brand,
        size,
        price,
    )
    if row is None:
        raise RuntimeError("Failed to create ad.")
    return row


async def update_ad(ad_id: int, *, brand: str, size: str, price: Decimal) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE ads
        SET brand = $2,
            size = $3,
            price = $4,
            updated_at = now()
        WHERE id = $1
          AND sold = false
        RETURNING {AD_COLUMNS}
        """,
        ad_id,
        brand,
        size,
        price,
    )


async def delete_ad(ad_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM ads
        WHERE id = $1
          AND sold = false
        RETURNING id
        """,
        ad_id,
    )
    return row is not None


async def set_image_path(ad_id: int, image_path: str | None) -> dict[str, Any] | None:
    """
    Update only `image_path`. Returns the updated row, or None if the ad is gone.
    """
    return await db.fetch_one(
        f"""
        UPDATE ads
        SET image_path = $2,
            updated_at = now()
        WHERE id = $1
        RETURNING {AD_COLUMNS}
        """,
        ad_id,
        image_path,
    )


async def lock_ads(ad_ids: list[int], *, conn: asyncpg.Connection) -> list[dict[str, Any]]:
    """
    Lock the given ads for the rest of the caller's transaction.
    """
    return await db.fetch_all(
        f"""
        SELECT {AD_COLUMNS}
        FROM ads
        WHERE id = ANY($1::bigint[])
        ORDER BY id
        FOR UPDATE
        """,
        ad_ids,
        conn=conn,
    )


async def mark_sold(ad_id: int, *, conn: asyncpg.Connection) -> None:
    await db.execute(
        """
        UPDATE ads
        SET sold = true,
            updated_at = now()
        WHERE id = $1
        """,
        ad_id,
        conn=conn,
    )
