"""Domain level exceptions and helpers for repository layers."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import StrEnum
from typing import Iterator

from sqlalchemy import exc as sa_exc

__all__ = [
    "StatusClass",
    "MediaShelfError",
    "NotFoundError",
    "InvalidParentError",
    "CyclicMoveError",
    "NotInTrashError",
    "AccessDeniedError",
    "ValidationError",
    "UnavailableError",
    "StorageUploadError",
    "MembershipConflictError",
    "RepositoryError",
    "IntegrityConstraintViolation",
    "ensure_found",
    "handle_sqlalchemy_errors",
]


class StatusClass(StrEnum):
    """Transport independent failure classes callers map to their own statuses."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"


class MediaShelfError(Exception):
    """Base class for application specific errors."""

    status_class: StatusClass = StatusClass.INTERNAL
    code: str = "internal_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class NotFoundError(MediaShelfError):
    """Raised when an id is absent or owned by another user (never distinguished)."""

    status_class = StatusClass.NOT_FOUND
    code = "not_found"


class InvalidParentError(MediaShelfError):
    """Raised when a parent folder does not resolve under the caller."""

    status_class = StatusClass.BAD_REQUEST
    code = "invalid_parent"


class CyclicMoveError(MediaShelfError):
    """Raised when a reparent would place a folder under itself."""

    status_class = StatusClass.CONFLICT
    code = "cyclic_move"


class NotInTrashError(MediaShelfError):
    """Raised when permanent delete targets an active asset."""

    status_class = StatusClass.CONFLICT
    code = "not_in_trash"


class AccessDeniedError(MediaShelfError):
    """Raised when the locked folder session is missing or expired."""

    status_class = StatusClass.FORBIDDEN
    code = "access_denied"


class ValidationError(MediaShelfError):
    """Raised for missing required fields or malformed input."""

    status_class = StatusClass.BAD_REQUEST
    code = "validation_error"


class UnavailableError(MediaShelfError):
    """Raised by the store when its connection cannot serve the request."""

    status_class = StatusClass.UNAVAILABLE
    code = "store_unavailable"


class StorageUploadError(MediaShelfError):
    """Raised when object storage rejects a ``put``."""

    status_class = StatusClass.INTERNAL
    code = "storage_upload_failed"


class MembershipConflictError(MediaShelfError):
    """Raised when an asset keeps changing folders while its locks are taken."""

    status_class = StatusClass.CONFLICT
    code = "membership_conflict"


class RepositoryError(MediaShelfError):
    """Base class for persistence layer failures."""


class IntegrityConstraintViolation(RepositoryError):
    """Raised when a database constraint is violated."""

    status_class = StatusClass.CONFLICT
    code = "integrity_violation"


@dataclass(slots=True)
class _EntityContext:
    """Internal helper describing the entity for error messages."""

    entity: str | None = None

    def format(self, message: str) -> str:
        if self.entity:
            return f"{self.entity}: {message}"
        return message


def ensure_found(value, *, entity: str, identifier: str):
    """Return ``value`` or raise :class:`NotFoundError` for ``identifier``."""

    if value is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return value


def _translate_sqlalchemy_error(exc: Exception, *, context: _EntityContext) -> MediaShelfError:
    if isinstance(exc, sa_exc.IntegrityError):
        return IntegrityConstraintViolation(context.format("integrity constraint violated"))
    if isinstance(exc, (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.DisconnectionError)):
        return UnavailableError(context.format("database unavailable"))
    if isinstance(exc, sa_exc.DBAPIError) and exc.connection_invalidated:
        return UnavailableError(context.format("database connection lost"))
    return RepositoryError(context.format("database operation failed"))


@contextmanager
def handle_sqlalchemy_errors(*, entity: str | None = None) -> Iterator[None]:
    """Translate SQLAlchemy errors into domain specific ones."""

    context = _EntityContext(entity)
    try:
        yield
    except (sa_exc.DBAPIError, sa_exc.DisconnectionError) as exc:
        raise _translate_sqlalchemy_error(exc, context=context) from exc
