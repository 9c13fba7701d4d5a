"""Short-lived capability tokens for locked media."""

from __future__ import annotations

import hashlib
from calendar import timegm
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError as PyJWTInvalidTokenError

from ..exceptions import NotFoundError

ALGORITHM = "HS256"


@dataclass(frozen=True, slots=True)
class CapabilityClaims:
    user_id: str
    asset_id: str


def _epoch(value: datetime) -> int:
    return timegm(value.utctimetuple())


def token_nonce(original_name: str, issued_at: datetime) -> str:
    digest = hashlib.sha256(f"{original_name}|{issued_at.isoformat()}".encode("utf-8"))
    return digest.hexdigest()[:32]


@dataclass(slots=True)
class CapabilitySigner:
    """Sign and verify per-access tokens bound to one user and one asset.

    ``now`` is passed in explicitly so verification follows the same clock
    the issuing service uses.
    """

    signing_key: str
    ttl: timedelta

    def issue(self, user_id: str, asset_id: str, original_name: str, now: datetime) -> tuple[str, datetime]:
        expires_at = now + self.ttl
        payload: dict[str, Any] = {
            "sub": user_id,
            "aid": asset_id,
            "iat": _epoch(now),
            "exp": _epoch(expires_at),
            "nonce": token_nonce(original_name, now),
        }
        return jwt.encode(payload, self.signing_key, algorithm=ALGORITHM), expires_at

    def verify(self, token: str, user_id: str, now: datetime) -> CapabilityClaims:
        """Expired, forged and foreign tokens all surface as ``NotFoundError``."""
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.signing_key,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "aid", "iat", "exp"], "verify_exp": False, "verify_iat": False},
            )
        except PyJWTInvalidTokenError as exc:
            raise NotFoundError("locked media not found") from exc
        if payload.get("sub") != user_id:
            raise NotFoundError("locked media not found")
        if int(payload["exp"]) <= _epoch(now):
            raise NotFoundError("locked media not found")
        return CapabilityClaims(user_id=user_id, asset_id=str(payload["aid"]))


__all__ = ["CapabilityClaims", "CapabilitySigner", "token_nonce"]
