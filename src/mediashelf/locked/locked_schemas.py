"""Pydantic schemas for the locked folder API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from ..media.media_schemas import AssetPayload


class UnlockRequest(BaseModel):
    password: str


class SessionResponse(BaseModel):
    has_access: bool
    session_expires: datetime | None = None


class LockedMediaPayload(AssetPayload):
    token: str
    token_expires_at: datetime


class LockedAccessResponse(BaseModel):
    url: str
