"""Auth-related data models."""

from __future__ import annotations

from datetime import datetime, timedelta
from pydantic import BaseModel


class TokenResponse(BaseModel):
    """Response from the Mythic Beasts ``/login`` endpoint."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int = 0


class TokenStatus(BaseModel):
    """Current state of the cached bearer token."""
    has_token: bool
    has_credentials: bool
    is_expired: bool
    expires_in: timedelta | None = None
    last_used_at: datetime | None = None
