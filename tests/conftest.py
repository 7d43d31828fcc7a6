"""Shared pytest fixtures and in-memory fakes (no database, no network)."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from ads.images import AdImageGateway
from ads.router import get_image_gateway
from auth.dependencies import get_token_store
from auth.sessions import TOKEN_TTL, SessionTokenStore
from main import app

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
SECURE_URL = "https://res.cloudinary.com/demo/image/upload/v1/ads/photo.png"


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class FakeTokenRepository:
    """Stands in for `auth.repository`; records every call."""

    def __init__(self):
        self.rows = {}
        self.calls = []

    def put(self, token, email, *, expires_at=None):
        expires_at = expires_at or NOW + TOKEN_TTL
        self.rows[token] = {
            "token": token,
            "email": email,
            "created_at": expires_at - TOKEN_TTL,
            "expires_at": expires_at,
        }

    async def insert_token(self, *, token, email, created_at, expires_at):
        self.calls.append(("insert", token))
        self.rows[token] = {
            "token": token,
            "email": email,
            "created_at": created_at,
            "expires_at": expires_at,
        }

    async def get_token(self, token):
        self.calls.append(("get", token))
        row = self.rows.get(token)
        return dict(row) if row is not None else None

    async def delete_token(self, token):
        self.calls.append(("delete", token))
        self.rows.pop(token, None)


class FakeAdRepository:
    """Stands in for the parts of `ads.repository` the image gateway uses."""

    def __init__(self):
        self.ads = {}
        self.writes = []

    def add(self, ad_id, *, owner_email, image_path=None, sold=False):
        self.ads[ad_id] = {
            "id": ad_id,
            "owner_email": owner_email,
            "brand": "Nike",
            "size": "42",
            "price": Decimal("99.99"),
            "sold": sold,
            "image_path": image_path,
            "created_at": NOW,
            "updated_at": NOW,
        }
        return self.ads[ad_id]

    async def get_ad(self, ad_id):
        row = self.ads.get(ad_id)
        return dict(row) if row is not None else None

    async def set_image_path(self, ad_id, image_path):
        self.writes.append((ad_id, image_path))
        row = self.ads.get(ad_id)
        if row is None:
            return None
        row["image_path"] = image_path
        return dict(row)


class FakeUploader:
    def __init__(self, url=SECURE_URL, error=None):
        self.url = url
        self.error = error
        self.calls = []

    async def upload(self, data, filename=None, content_type=None):
        self.calls.append((data, filename, content_type))
        if self.error is not None:
            raise self.error
        return self.url


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_repo():
    return FakeTokenRepository()


@pytest.fixture
def token_store(token_repo, clock):
    return SessionTokenStore(token_repo, clock=clock)


@pytest.fixture
def ad_repo():
    return FakeAdRepository()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def gateway(token_store, uploader, ad_repo):
    return AdImageGateway(token_store=token_store, uploader=uploader, ads=ad_repo)


@pytest.fixture
def client(token_store, gateway):
    """TestClient wired to the fakes; the lifespan (DB pool) is not started."""
    app.dependency_overrides[get_token_store] = lambda: token_store
    app.dependency_overrides[get_image_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
