"""Transactional boundary shared by repositories and services."""

from __future__ import annotations

from typing import Callable

from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from ..assets.assets_repository import AssetRepository
from ..exceptions import handle_sqlalchemy_errors
from ..folders.folders_repository import FolderRepository
from ..locked.locked_repository import LockedSessionRepository


class SqlAlchemyUnitOfWork:
    """Open one session, expose repositories bound to it, commit on clean exit."""

    session: Session
    assets: AssetRepository
    folders: FolderRepository
    locked_sessions: LockedSessionRepository

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self._session_factory()
        self.assets = AssetRepository(self.session)
        self.folders = FolderRepository(self.session)
        self.locked_sessions = LockedSessionRepository(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object,
    ) -> None:
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self.session.close()
        if isinstance(exc, (sa_exc.DBAPIError, sa_exc.DisconnectionError)):
            with handle_sqlalchemy_errors(entity="store"):
                raise exc

    def commit(self) -> None:
        with handle_sqlalchemy_errors(entity="store"):
            self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


def unit_of_work_factory(session_factory: Callable[[], Session]) -> UnitOfWorkFactory:
    return lambda: SqlAlchemyUnitOfWork(session_factory)


__all__ = ["SqlAlchemyUnitOfWork", "UnitOfWorkFactory", "unit_of_work_factory"]
