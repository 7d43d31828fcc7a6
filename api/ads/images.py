"""
Ad image gateway.

Attaching an image proxies the uploaded bytes to the image host (Cloudinary)
and stores the returned URL in `ads.image_path`. The ad row is written only
after the host has confirmed the upload.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from fastapi import HTTPException, UploadFile, status

from auth import service as auth_service
from auth.sessions import SessionTokenStore
from core.cloudinary import CloudinaryConfigError, CloudinaryUploadError
from core.config import DEFAULT_MAX_UPLOAD_BYTES

from . import repository as ad_repository
from . import schemas
from .service import ensure_owner, to_ad_response

ALLOWED_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp"}
DEFAULT_IMAGE_EXTENSION = "jpg"

logger = logging.getLogger(__name__)


class ImageUploader(Protocol):
    async def upload(self, data: bytes, filename: str | None = None, content_type: str | None = None) -> str:
        ...


def image_extension(filename: str | None) -> str:
    """
    Lower-cased text after the last dot of the base name; `jpg` when nothing follows a dot.

    A leading dot counts, so `.gif` is `gif`.
    """
    name = (filename or "").strip().replace("\\", "/").rsplit("/", 1)[-1]
    _, dot, ext = name.rpartition(".")
    ext = ext.strip().lower() if dot else ""
    return ext or DEFAULT_IMAGE_EXTENSION


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Max is {max_bytes} bytes.",
            )

    return bytes(buf)


class AdImageGateway:
    """
    `ads` needs async `get_ad(ad_id)` and `set_image_path(ad_id, path)`;
    the `ads.repository` module is the production one.
    """

    def __init__(
        self,
        *,
        token_store: SessionTokenStore,
        uploader: ImageUploader,
        ads: Any = ad_repository,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ) -> None:
        self._token_store = token_store
        self._uploader = uploader
        self._ads = ads
        self._max_upload_bytes = max_upload_bytes

    async def _owned_ad(self, ad_id: int, authorization: str | None) -> dict:
        email = await auth_service.resolve_account_id_from_bearer_header(
            authorization,
            store=self._token_store,
        )
        if email is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in.")

        ad_row = await self._ads.get_ad(ad_id)
        if ad_row is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ad not found.")

        ensure_owner(ad_row, email)
        return ad_row

    async def _store_image_path(self, ad_id: int, image_path: str | None) -> schemas.AdResponse:
        row = await self._ads.set_image_path(ad_id, image_path)
        if row is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ad not found.")
        return to_ad_response(row)

    async def attach_image(
        self,
        ad_id: int,
        authorization: str | None,
        file: UploadFile | None,
    ) -> schemas.AdResponse:
        await self._owned_ad(ad_id, authorization)

        if file is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

        ext = image_extension(file.filename)
        if ext not in ALLOWED_IMAGE_EXTENSIONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported file type '{ext}'. Allowed: {sorted(ALLOWED_IMAGE_EXTENSIONS)}",
            )

        data = await read_upload_bytes(file, max_bytes=self._max_upload_bytes)
        if not data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")

        try:
            url = await self._uploader.upload(data, file.filename, file.content_type)
        except CloudinaryConfigError as exc:
            logger.error("image_upload_misconfigured ad_id=%s error=%s", ad_id, exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(exc),
            ) from exc
        except CloudinaryUploadError as exc:
            logger.warning("image_upload_failed ad_id=%s error=%s", ad_id, exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Upload failed.",
            ) from exc

        ad = await self._store_image_path(ad_id, url)
        logger.info("image_attached ad_id=%s ext=%s bytes=%s", ad_id, ext, len(data))
        return ad

    async def detach_image(self, ad_id: int, authorization: str | None) -> schemas.AdResponse:
        await self._owned_ad(ad_id, authorization)
        return await self._store_image_path(ad_id, None)
