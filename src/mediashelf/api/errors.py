"""Translate domain failures into HTTP responses."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..exceptions import MediaShelfError, StatusClass

logger = logging.getLogger(__name__)

STATUS_CODES: dict[StatusClass, int] = {
    StatusClass.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    StatusClass.CONFLICT: status.HTTP_409_CONFLICT,
    StatusClass.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    StatusClass.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    StatusClass.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StatusClass.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@dataclass(slots=True)
class ApiError(Exception):
    """Structured application-level error for HTTP handlers."""

    status_code: int
    code: str
    message: str
    headers: Mapping[str, str] | None = None

    @classmethod
    def from_domain(cls, exc: MediaShelfError) -> "ApiError":
        return cls(
            status_code=STATUS_CODES.get(exc.status_class, status.HTTP_500_INTERNAL_SERVER_ERROR),
            code=exc.code,
            message=exc.message,
        )

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content={"error": {"code": self.code, "message": self.message}},
            headers=dict(self.headers or {}),
        )


async def api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return exc.to_response()


async def domain_error_handler(request: Request, exc: MediaShelfError) -> JSONResponse:
    error = ApiError.from_domain(exc)
    if error.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "api.request.failed",
            extra={"path": request.url.path, "code": error.code, "error_message": error.message},
        )
    return error.to_response()


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(MediaShelfError, domain_error_handler)  # type: ignore[arg-type]


__all__ = ["ApiError", "STATUS_CODES", "api_error_handler", "domain_error_handler", "register_error_handlers"]
