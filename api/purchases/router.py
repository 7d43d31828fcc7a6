"""
FastAPI router for purchases.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.post("/purchases/checkout", response_model=schemas.CheckoutResponse)
async def checkout(
    payload: schemas.CheckoutRequest,
    email: str = Depends(auth_dependencies.get_current_email),
) -> schemas.CheckoutResponse:
    return await service.checkout(payload, email=email)


@router.get("/purchases", response_model=list[schemas.PurchaseResponse])
async def list_purchases(
    email: str = Depends(auth_dependencies.get_current_email),
) -> list[schemas.PurchaseResponse]:
    return await service.list_purchases(email)
