"""Common authentication dependencies for FastAPI routers."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .auth_service import InvalidTokenError, TokenExpiredError, TokenIdentityService

security = HTTPBearer(auto_error=False)


def get_identity_service(request: Request) -> TokenIdentityService:
    try:
        return request.app.state.identity_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("TokenIdentityService is not configured") from exc


def require_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    service: TokenIdentityService = Depends(get_identity_service),
) -> str:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"status": "error", "failure_reason": "missing_token"},
        )
    try:
        return service.resolve_user_id(credentials.credentials)
    except TokenExpiredError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"status": "error", "failure_reason": "token_expired"},
        ) from exc
    except InvalidTokenError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"status": "error", "failure_reason": "invalid_token"},
        ) from exc


__all__ = ["get_identity_service", "require_user_id"]
