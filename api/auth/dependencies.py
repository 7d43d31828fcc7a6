"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request, status

from . import service
from .sessions import SessionTokenStore


def get_token_store(request: Request) -> SessionTokenStore:
    return request.app.state.token_store


async def get_current_email(
    authorization: str | None = Header(default=None),
    store: SessionTokenStore = Depends(get_token_store),
) -> str:
    email = await service.resolve_account_id_from_bearer_header(authorization, store=store)
    if email is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return email
