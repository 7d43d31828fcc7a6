"""
Auth business logic.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import HTTPException, status

from . import repository, schemas, security
from .sessions import SessionTokenStore

logger = logging.getLogger(__name__)


async def register(payload: schemas.RegisterRequest, *, store: SessionTokenStore) -> schemas.AuthResponse:
    email = security.normalize_email(payload.email)

    existing = await repository.get_user_by_email(email)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        )

    password_hash = security.hash_password(payload.password)
    try:
        user_row = await repository.create_user(email=email, password_hash=password_hash)
    except asyncpg.UniqueViolationError as exc:
        # Lost a race with a concurrent registration of the same email.
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        ) from exc

    token = await store.issue_token(str(user_row["email"]))
    logger.info("user_registered user_id=%s", user_row["id"])
    return schemas.AuthResponse(
        token=token,
        email=str(user_row["email"]),
        message="Registration successful.",
    )


async def login(payload: schemas.LoginRequest, *, store: SessionTokenStore) -> schemas.AuthResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )

    token = await store.issue_token(str(user_row["email"]))
    return schemas.AuthResponse(
        token=token,
        email=str(user_row["email"]),
        message="Login successful.",
    )


async def logout(authorization: str | None, *, store: SessionTokenStore) -> schemas.LogoutResponse:
    await store.revoke_token(security.parse_bearer_header(authorization))
    return schemas.LogoutResponse()


async def resolve_account_id_from_bearer_header(
    authorization: str | None,
    *,
    store: SessionTokenStore,
) -> str | None:
    return await store.resolve_account_id(security.parse_bearer_header(authorization))
