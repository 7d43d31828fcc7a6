"""
Cloudinary HTTP client (unsigned uploads).

Used endpoint:
- POST {api_base}/{cloud_name}/image/upload
  multipart fields: upload_preset, file  ->  {"secure_url": "https://...", ...}

`CloudinaryUploader.upload()` is the upload port the ad image gateway talks
to. Request construction lives in `build_upload_request()` so the multipart
body can be inspected without a network round-trip.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import CloudinarySettings

DEFAULT_FILENAME = "upload.jpg"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

logger = logging.getLogger(__name__)


# Config failures carry an operator-facing message; upload failures don't.
class CloudinaryConfigError(RuntimeError):
    pass


class CloudinaryUploadError(RuntimeError):
    pass


def build_upload_request(
    settings: CloudinarySettings,
    data: bytes,
    *,
    filename: str | None = None,
    content_type: str | None = None,
) -> httpx.Request:
    """
    Build the multipart POST: `upload_preset` first, then the `file` part.

    httpx picks a fresh random boundary for every request.
    """
    safe_name = (filename or "").strip() or DEFAULT_FILENAME
    ct = (content_type or "").strip() or DEFAULT_CONTENT_TYPE

    return httpx.Request(
        "POST",
        settings.upload_url,
        data={"upload_preset": settings.upload_preset},
        files={"file": (safe_name, data, ct)},
        extensions={"timeout": httpx.Timeout(settings.timeout_s).as_dict()},
    )


def _secure_url(resp: httpx.Response) -> str:
    try:
        payload: Any = resp.json()
    except ValueError as exc:
        raise CloudinaryUploadError("Cloudinary returned a non-JSON response.") from exc

    url = payload.get("secure_url") if isinstance(payload, dict) else None
    if not isinstance(url, str) or not url.strip():
        raise CloudinaryUploadError("Cloudinary response has no secure_url.")
    return url.strip()


class CloudinaryUploader:
    """
    Uploads image bytes and returns the hosted URL.

    Connect failures are retried by the transport (`settings.retries`);
    anything that reached Cloudinary is not retried.
    """

    def __init__(
        self,
        settings: CloudinarySettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    def _make_transport(self) -> httpx.AsyncBaseTransport:
        if self._transport is not None:
            return self._transport
        return httpx.AsyncHTTPTransport(retries=self.settings.retries)

    def ensure_configured(self) -> None:
        missing = self.settings.missing()
        if missing:
            raise CloudinaryConfigError(
                f"Cloudinary configuration missing ({'/'.join(missing)})."
            )

    async def upload(
        self,
        data: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> str:
        self.ensure_configured()

        request = build_upload_request(
            self.settings,
            data,
            filename=filename,
            content_type=content_type,
        )

        try:
            async with httpx.AsyncClient(transport=self._make_transport()) as client:
                resp = await client.send(request)
        except httpx.HTTPError as exc:
            raise CloudinaryUploadError(f"Cloudinary request failed: {exc}") from exc

        if not resp.is_success:
            # Avoid dumping huge bodies; include a small snippet.
            body = resp.text[:300]
            raise CloudinaryUploadError(f"Cloudinary upload failed: {resp.status_code} {body}")

        url = _secure_url(resp)
        logger.info("cloudinary_upload_ok filename=%s bytes=%s", filename, len(data))
        return url
