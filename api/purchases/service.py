"""
Checkout: buy one or more ads in a single transaction.

Every listed ad is locked, validated, marked sold, recorded as a purchase and
announced to its seller. Any failure rolls the whole checkout back.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from fastapi import HTTPException, status

from ads import repository as ad_repository
from auth.security import same_account
from core import db
from notifications import repository as notification_repository
from notifications.service import sold_message

from . import repository, schemas

logger = logging.getLogger(__name__)


def to_purchase_response(row: dict) -> schemas.PurchaseResponse:
    return schemas.PurchaseResponse(
        id=int(row["id"]),
        ad_id=int(row["ad_id"]),
        buyer_email=str(row["buyer_email"]),
        seller_email=str(row["seller_email"]),
        price=row["price"],
        created_at=row.get("created_at"),
    )


def _check_purchasable(ad_id: int, ad_row: dict | None, *, buyer_email: str) -> dict:
    if ad_row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Ad {ad_id} not found.")
    if same_account(str(ad_row["owner_email"]), buyer_email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ad {ad_id} is your own ad.",
        )
    if bool(ad_row["sold"]):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Ad {ad_id} is already sold.")
    return ad_row


async def checkout(payload: schemas.CheckoutRequest, *, email: str) -> schemas.CheckoutResponse:
    # Keep request order, drop duplicates.
    ad_ids = list(dict.fromkeys(payload.ad_ids))

    purchases: list[schemas.PurchaseResponse] = []
    async with db.transaction() as conn:
        locked = await ad_repository.lock_ads(ad_ids, conn=conn)
        by_id = {int(row["id"]): row for row in locked}
        ads = [_check_purchasable(ad_id, by_id.get(ad_id), buyer_email=email) for ad_id in ad_ids]

        for ad_row in ads:
            ad_id = int(ad_row["id"])
            await ad_repository.mark_sold(ad_id, conn=conn)
            purchase_row = await repository.insert_purchase(
                ad_id=ad_id,
                buyer_email=email,
                seller_email=str(ad_row["owner_email"]),
                price=ad_row["price"],
                conn=conn,
            )
            await notification_repository.create_notification(
                recipient_email=str(ad_row["owner_email"]),
                message=sold_message(ad_row),
                ad_id=ad_id,
                conn=conn,
            )
            purchases.append(to_purchase_response(purchase_row))

    total = sum((p.price for p in purchases), Decimal("0"))
    logger.info("checkout_complete ads=%s total=%s", ad_ids, total)
    return schemas.CheckoutResponse(purchases=purchases, count=len(purchases), total=total)


async def list_purchases(email: str) -> list[schemas.PurchaseResponse]:
    rows = await repository.list_by_buyer(email)
    return [to_purchase_response(row) for row in rows]
