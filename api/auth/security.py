"""
Auth security helpers.
"""

from __future__ import annotations

import secrets

import bcrypt

# 16 random bytes -> 128-bit opaque session token, rendered as 32 hex chars.
SESSION_TOKEN_BYTES = 16


class AuthSecurityError(RuntimeError):
    pass


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def same_account(a: str | None, b: str | None) -> bool:
    """
    Account identifiers (emails) match case-insensitively.
    """
    return normalize_email(a) == normalize_email(b) != ""


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_session_token() -> str:
    return secrets.token_hex(SESSION_TOKEN_BYTES)


def parse_bearer_header(authorization: str | None) -> str | None:
    """
    Return the token from `Bearer <token>`, or None for any other shape.
    """
    raw = (authorization or "").strip()
    parts = raw.split(" ", 1)
    if len(parts) != 2:
        return None

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        return None
    return token
