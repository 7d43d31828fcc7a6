"""
Auth persistence helpers: users and session tokens.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core import db

from .security import normalize_email


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def create_user(*, email: str, password_hash: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO users (email, password_hash)
        VALUES ($1, $2)
        RETURNING id, email, created_at
        """,
        normalize_email(email),
        password_hash,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, email, password_hash, created_at
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def insert_token(*, token: str, email: str, created_at: datetime, expires_at: datetime) -> None:
    await db.execute(
        """
        INSERT INTO session_tokens (token, email, created_at, expires_at)
        VALUES ($1, $2, $3, $4)
        """,
        token,
        email,
        _utc(created_at),
        _utc(expires_at),
    )


async def get_token(token: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT token, email, created_at, expires_at
        FROM session_tokens
        WHERE token = $1
        """,
        token,
    )


async def delete_token(token: str) -> None:
    await db.execute(
        """
        DELETE FROM session_tokens
        WHERE token = $1
        """,
        token,
    )
