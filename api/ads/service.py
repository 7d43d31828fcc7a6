"""
Ad business logic: listing, CRUD and owner checks.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from auth.security import same_account

from . import repository, schemas

logger = logging.getLogger(__name__)


def to_ad_response(row: dict) -> schemas.AdResponse:
    return schemas.AdResponse(
        id=int(row["id"]),
        owner_email=str(row["owner_email"]),
        brand=str(row["brand"]),
        size=str(row["size"]),
        price=row["price"],
        sold=bool(row["sold"]),
        image_path=row.get("image_path"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def ensure_owner(ad_row: dict, email: str) -> None:
    if not same_account(str(ad_row.get("owner_email") or ""), email):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed.",
        )


def _ensure_not_sold(ad_row: dict) -> None:
    if bool(ad_row.get("sold")):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ad is already sold.",
        )


async def get_ad_row(ad_id: int) -> dict:
    row = await repository.get_ad(ad_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ad not found.")
    return row


async def list_ads(*, limit: int, offset: int) -> list[schemas.AdResponse]:
    rows = await repository.list_unsold_ads(limit=limit, offset=offset)
    return [to_ad_response(row) for row in rows]


async def _raise_write_refused(ad_id: int) -> None:
    # The conditional write matched nothing: the ad was sold or removed meanwhile.
    _ensure_not_sold(await get_ad_row(ad_id))
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ad not found.")


async def list_my_ads(email: str) -> list[schemas.AdResponse]:
    rows = await repository.list_ads_by_owner(email)
    return [to_ad_response(row) for row in rows]


async def get_ad(ad_id: int) -> schemas.AdResponse:
    return to_ad_response(await get_ad_row(ad_id))


async def create_ad(payload: schemas.AdCreateRequest, *, email: str) -> schemas.AdResponse:
    row = await repository.create_ad(
        owner_email=email,
        brand=payload.brand.strip(),
        size=payload.size.strip(),
        price=payload.price,
    )
    logger.info("ad_created ad_id=%s", row["id"])
    return to_ad_response(row)


async def update_ad(ad_id: int, payload: schemas.AdUpdateRequest, *, email: str) -> schemas.AdResponse:
    existing = await get_ad_row(ad_id)
    ensure_owner(existing, email)
    _ensure_not_sold(existing)

    row = await repository.update_ad(
        ad_id,
        brand=payload.brand.strip(),
        size=payload.size.strip(),
        price=payload.price,
    )
    if row is None:
        await _raise_write_refused(ad_id)
    return to_ad_response(row)


async def delete_ad(ad_id: int, *, email: str) -> dict:
    existing = await get_ad_row(ad_id)
    ensure_owner(existing, email)
    # Sold ads stay around as part of the buyer's purchase history.
    _ensure_not_sold(existing)

    deleted = await repository.delete_ad(ad_id)
    if not deleted:
        await _raise_write_refused(ad_id)
    logger.info("ad_deleted ad_id=%s", ad_id)
    return {"ok": True, "ad_id": ad_id}
