"""Persistence for per-user locked folder sessions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from ..db.db_models import LockedFolderSessionModel
from ..exceptions import handle_sqlalchemy_errors
from .locked_models import LockedFolderSession


class LockedSessionRepository:
    """One row per user, replaced in place on grant and revoke."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find(self, user_id: str) -> LockedFolderSession | None:
        with handle_sqlalchemy_errors(entity="locked_session"):
            model = self._session.get(LockedFolderSessionModel, user_id)
        if model is None:
            return None
        return LockedFolderSession(
            user_id=model.user_id,
            has_access=bool(model.has_access),
            session_expires=model.session_expires,
            updated_at=model.updated_at,
        )

    def save(
        self,
        user_id: str,
        *,
        has_access: bool,
        session_expires: datetime | None,
        updated_at: datetime,
    ) -> LockedFolderSession:
        with handle_sqlalchemy_errors(entity="locked_session"):
            model = self._session.get(LockedFolderSessionModel, user_id)
            if model is None:
                model = LockedFolderSessionModel(user_id=user_id)
                self._session.add(model)
            model.has_access = has_access
            model.session_expires = session_expires
            model.updated_at = updated_at
            self._session.flush()
        return LockedFolderSession(
            user_id=user_id,
            has_access=has_access,
            session_expires=session_expires,
            updated_at=updated_at,
        )
