"""Locked folder routes: unlock, revoke, listing and token access."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..auth.auth_dependencies import require_user_id
from ..media.media_schemas import asset_payload
from .locked_schemas import LockedAccessResponse, LockedMediaPayload, SessionResponse, UnlockRequest
from .locked_service import AccessGate

router = APIRouter(prefix="/api/locked", tags=["locked"])


def get_access_gate(request: Request) -> AccessGate:
    try:
        return request.app.state.access_gate  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("AccessGate is not configured") from exc


@router.post("/unlock")
def unlock(
    payload: UnlockRequest,
    user_id: str = Depends(require_user_id),
    gate: AccessGate = Depends(get_access_gate),
) -> SessionResponse:
    session = gate.unlock(user_id, payload.password)
    return SessionResponse(has_access=session.has_access, session_expires=session.session_expires)


@router.post("/revoke")
def revoke(
    user_id: str = Depends(require_user_id),
    gate: AccessGate = Depends(get_access_gate),
) -> SessionResponse:
    gate.revoke_session(user_id)
    return SessionResponse(has_access=False)


@router.get("/session")
def session_status(
    user_id: str = Depends(require_user_id),
    gate: AccessGate = Depends(get_access_gate),
) -> SessionResponse:
    return SessionResponse(has_access=gate.check_access(user_id))


@router.get("/media")
def list_locked(
    user_id: str = Depends(require_user_id),
    gate: AccessGate = Depends(get_access_gate),
) -> list[LockedMediaPayload]:
    return [
        LockedMediaPayload(
            **asset_payload(item.asset).model_dump(),
            token=item.token,
            token_expires_at=item.token_expires_at,
        )
        for item in gate.list_locked(user_id)
    ]


@router.get("/access/{token}")
def access_by_token(
    token: str,
    user_id: str = Depends(require_user_id),
    gate: AccessGate = Depends(get_access_gate),
) -> LockedAccessResponse:
    return LockedAccessResponse(url=gate.access_by_token(user_id, token))
