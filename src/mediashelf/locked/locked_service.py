"""Access gate: password-reverified, short-lived sessions over locked media."""

from __future__ import annotations

from datetime import timedelta

import structlog

from ..clock import Clock, utcnow
from ..db.unit_of_work import UnitOfWorkFactory
from ..exceptions import AccessDeniedError, NotFoundError, UnavailableError, ValidationError
from .locked_models import LockedAsset, LockedFolderSession
from .locked_passwords import PasswordVerifier
from .locked_tokens import CapabilitySigner

logger = structlog.get_logger(__name__)

DEFAULT_SESSION_TTL = timedelta(minutes=5)


class AccessGate:
    """Expiry is evaluated lazily on every check; nothing sweeps sessions."""

    def __init__(
        self,
        *,
        uow_factory: UnitOfWorkFactory,
        signer: CapabilitySigner,
        session_ttl: timedelta = DEFAULT_SESSION_TTL,
        password_verifier: PasswordVerifier | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._signer = signer
        self._session_ttl = session_ttl
        self._password_verifier = password_verifier
        self._clock = clock or utcnow

    def grant_session(self, user_id: str, ttl: timedelta | None = None) -> LockedFolderSession:
        now = self._clock()
        with self._uow_factory() as uow:
            session = uow.locked_sessions.save(
                user_id,
                has_access=True,
                session_expires=now + (ttl if ttl is not None else self._session_ttl),
                updated_at=now,
            )
        logger.info("locked.session.granted", user_id=user_id, expires=session.session_expires)
        return session

    def unlock(self, user_id: str, password: str) -> LockedFolderSession:
        """Re-verify the account password, then open a session."""
        if not password:
            raise ValidationError("password is required")
        if self._password_verifier is None:
            raise UnavailableError("password verification is not configured")
        if not self._password_verifier.verify(user_id, password):
            logger.warning("locked.unlock.rejected", user_id=user_id)
            raise AccessDeniedError("invalid password")
        return self.grant_session(user_id)

    def revoke_session(self, user_id: str) -> None:
        now = self._clock()
        with self._uow_factory() as uow:
            uow.locked_sessions.save(user_id, has_access=False, session_expires=None, updated_at=now)
        logger.info("locked.session.revoked", user_id=user_id)

    def check_access(self, user_id: str) -> bool:
        with self._uow_factory() as uow:
            session = uow.locked_sessions.find(user_id)
        return session is not None and session.is_open(self._clock())

    def list_locked(self, user_id: str) -> list[LockedAsset]:
        """Locked, non-trashed assets, most recently locked first, each with a fresh token."""
        self._require_access(user_id)
        now = self._clock()
        with self._uow_factory() as uow:
            assets = uow.assets.list_locked(user_id)
        locked: list[LockedAsset] = []
        for asset in assets:
            token, expires_at = self._signer.issue(user_id, asset.id, asset.original_name, now)
            locked.append(LockedAsset(asset=asset, token=token, token_expires_at=expires_at))
        return locked

    def access_by_token(self, user_id: str, token: str) -> str:
        self._require_access(user_id)
        claims = self._signer.verify(token, user_id, self._clock())
        with self._uow_factory() as uow:
            asset = uow.assets.find(claims.asset_id, user_id)
        if asset is None or not asset.is_locked or asset.is_trashed:
            raise NotFoundError("locked media not found")
        return asset.url

    def _require_access(self, user_id: str) -> None:
        if not self.check_access(user_id):
            raise AccessDeniedError("locked folder session is missing or expired")


__all__ = ["AccessGate"]
