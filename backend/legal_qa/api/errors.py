"""Exception handlers mapping error kinds to the JSON error envelope."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from legal_qa.api.dependencies import get_app_settings
from legal_qa.core.errors import LegalQAError, NotFound, Unauthorized, ValidationError
from legal_qa.models.dto import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(status: int, code: int, message: str, result: Any = None) -> JSONResponse:
    payload = ErrorResponse(code=code, message=message, result=result)
    return JSONResponse(status_code=status, content=jsonable_encoder(payload.model_dump(by_alias=True)))


def render_error(exc: LegalQAError) -> JSONResponse:
    return error_response(exc.status, exc.code, exc.message, exc.detail)


def _client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def register_exception_handlers(app: FastAPI) -> None:
    """Install one handler per failure class on ``app``."""

    @app.exception_handler(LegalQAError)
    async def handle_legal_qa_error(request: Request, exc: LegalQAError) -> JSONResponse:
        log = logger.error if exc.status >= 500 else logger.warning
        log(
            "[%s] [%s] %s (%d) %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc.status,
            exc.message,
            exc_info=exc.__cause__ is not None,
        )
        return render_error(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        logger.error(
            "[ValidationError] [%s] %s (400)",
            request.method,
            request.url.path,
            extra={"ctx_errors": errors},
        )
        detail = None if get_app_settings().is_production else errors
        return render_error(ValidationError(detail=detail))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            logger.warning("[NotFound] [%s] [%s] %s (404)", _client_ip(request), request.method, request.url.path)
            return render_error(NotFound())
        if exc.status_code == 401:
            return render_error(Unauthorized())
        logger.warning("[HTTPException] [%s] %s (%d)", request.method, request.url.path, exc.status_code)
        return error_response(exc.status_code, exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "[Internal Server Error] [%s] %s (500)",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return render_error(LegalQAError())


__all__ = ["register_exception_handlers", "error_response", "render_error"]
