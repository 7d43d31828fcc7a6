"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=4, max_length=128)


class RegisterRequest(CredentialsRequest):
    pass


class LoginRequest(CredentialsRequest):
    password: str = Field(..., min_length=1, max_length=128)


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    email: str
    message: str


class AuthFailureResponse(BaseModel):
    success: bool = False
    message: str
    detail: str


class LogoutResponse(BaseModel):
    success: bool = True


class MeResponse(BaseModel):
    email: str
