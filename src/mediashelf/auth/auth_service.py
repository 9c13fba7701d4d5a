"""Bearer identity: resolve the caller's user id from a signed JWT."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from jwt import ExpiredSignatureError
from jwt import InvalidTokenError as PyJWTInvalidTokenError
import structlog

logger = structlog.get_logger(__name__)


class AuthError(Exception):
    """Base class for identity failures."""


class InvalidTokenError(AuthError):
    """Raised when token cannot be decoded."""


class TokenExpiredError(AuthError):
    """Raised when token is expired."""


@dataclass(slots=True)
class TokenIdentityService:
    """Validate HS256 bearer tokens; the ``sub`` claim is the user id."""

    signing_key: str
    token_ttl: timedelta = timedelta(hours=12)

    def issue_token(self, user_id: str, issued_at: datetime | None = None) -> str:
        issued = issued_at or datetime.now(tz=timezone.utc)
        payload: dict[str, Any] = {
            "sub": user_id,
            "iat": int(issued.timestamp()),
            "exp": int((issued + self.token_ttl).timestamp()),
        }
        return jwt.encode(payload, self.signing_key, algorithm="HS256")

    def resolve_user_id(self, token: str) -> str:
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.signing_key,
                algorithms=["HS256"],
                options={"require": ["exp", "sub"]},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Token expired") from exc
        except PyJWTInvalidTokenError as exc:
            logger.info("auth.token.rejected", reason=str(exc))
            raise InvalidTokenError("Invalid token") from exc
        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Token subject is missing")
        return user_id


__all__ = ["AuthError", "InvalidTokenError", "TokenExpiredError", "TokenIdentityService"]
