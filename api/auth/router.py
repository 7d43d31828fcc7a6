"""
FastAPI router for registration, login and logout.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse

from . import schemas, service
from .dependencies import get_current_email, get_token_store
from .sessions import SessionTokenStore

router = APIRouter()

FAILURE_RESPONSES = {
    401: {"model": schemas.AuthFailureResponse},
    409: {"model": schemas.AuthFailureResponse},
}


def _failure(exc: HTTPException) -> JSONResponse:
    """
    Register/login failures keep the `success`/`message` shape of the success
    body; `detail` stays for clients that read FastAPI errors.
    """
    text = str(exc.detail)
    body = schemas.AuthFailureResponse(message=text, detail=text)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=exc.headers)


@router.post("/register", response_model=schemas.AuthResponse, responses=FAILURE_RESPONSES)
async def register(
    payload: schemas.RegisterRequest,
    store: SessionTokenStore = Depends(get_token_store),
):
    try:
        return await service.register(payload, store=store)
    except HTTPException as exc:
        return _failure(exc)


@router.post("/login", response_model=schemas.AuthResponse, responses=FAILURE_RESPONSES)
async def login(
    payload: schemas.LoginRequest,
    store: SessionTokenStore = Depends(get_token_store),
):
    try:
        return await service.login(payload, store=store)
    except HTTPException as exc:
        return _failure(exc)


@router.post("/logout", response_model=schemas.LogoutResponse)
async def logout(
    authorization: str | None = Header(default=None),
    store: SessionTokenStore = Depends(get_token_store),
) -> schemas.LogoutResponse:
    return await service.logout(authorization, store=store)


@router.get("/me", response_model=schemas.MeResponse)
async def me(email: str = Depends(get_current_email)) -> schemas.MeResponse:
    return schemas.MeResponse(email=email)
