"""Pydantic models for admin sign-in."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionInfo(BaseModel):
    email: str
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    redirect: str | None = None


__all__ = ["LoginRequest", "SessionInfo"]
