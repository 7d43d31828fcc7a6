"""
FastAPI router for ad listings and ad images.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Header, Query, Request, UploadFile

from auth import dependencies as auth_dependencies

from . import schemas, service
from .images import AdImageGateway

router = APIRouter()


def get_image_gateway(request: Request) -> AdImageGateway:
    return request.app.state.image_gateway


@router.get("/ads", response_model=list[schemas.AdResponse])
async def list_ads(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[schemas.AdResponse]:
    """
    Public listing: unsold ads, newest first.
    """
    return await service.list_ads(limit=limit, offset=offset)


@router.get("/ads/mine", response_model=list[schemas.AdResponse])
async def list_my_ads(
    email: str = Depends(auth_dependencies.get_current_email),
) -> list[schemas.AdResponse]:
    return await service.list_my_ads(email)


@router.get("/ads/{ad_id}", response_model=schemas.AdResponse)
async def get_ad(ad_id: int) -> schemas.AdResponse:
    return await service.get_ad(ad_id)


@router.post("/ads", response_model=schemas.AdResponse)
async def create_ad(
    payload: schemas.AdCreateRequest,
    email: str = Depends(auth_dependencies.get_current_email),
) -> schemas.AdResponse:
    return await service.create_ad(payload, email=email)


@router.put("/ads/{ad_id}", response_model=schemas.AdResponse)
async def update_ad(
    ad_id: int,
    payload: schemas.AdUpdateRequest,
    email: str = Depends(auth_dependencies.get_current_email),
) -> schemas.AdResponse:
    return await service.update_ad(ad_id, payload, email=email)


@router.delete("/ads/{ad_id}")
async def delete_ad(
    ad_id: int,
    email: str = Depends(auth_dependencies.get_current_email),
) -> dict:
    return await service.delete_ad(ad_id, email=email)


@router.post("/ads/{ad_id}/image", response_model=schemas.AdResponse)
async def upload_image(
    ad_id: int,
    file: UploadFile | None = File(default=None),
    authorization: str | None = Header(default=None),
    gateway: AdImageGateway = Depends(get_image_gateway),
) -> schemas.AdResponse:
    """
    Upload an image (jpg, jpeg, png, webp) for an ad owned by the caller.
    """
    return await gateway.attach_image(ad_id, authorization, file)


@router.delete("/ads/{ad_id}/image", response_model=schemas.AdResponse)
async def delete_image(
    ad_id: int,
    authorization: str | None = Header(default=None),
    gateway: AdImageGateway = Depends(get_image_gateway),
) -> schemas.AdResponse:
    return await gateway.detach_image(ad_id, authorization)
