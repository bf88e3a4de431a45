"""Exception handlers — map domain errors to JSON error responses.

Every error body has the shape {"message": str, "details": Any | null}.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.errors import BusinessRuleError, NotFoundError, OdaryError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, details: object = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "details": details})


async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.warning("Resource not found: %s", exc.message)
    return _error_response(status.HTTP_404_NOT_FOUND, exc.message, exc.details)


async def handle_business_rule(request: Request, exc: BusinessRuleError) -> JSONResponse:
    logger.warning("Business rule violation: %s", exc.message)
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.details)


async def handle_odary_error(request: Request, exc: OdaryError) -> JSONResponse:
    logger.error("Unhandled domain error on %s: %s", request.url.path, exc.message)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message, exc.details)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s", request.url.path)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An error occurred while processing your request",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, handle_not_found)  # type: ignore[arg-type]
    app.add_exception_handler(BusinessRuleError, handle_business_rule)  # type: ignore[arg-type]
    app.add_exception_handler(OdaryError, handle_odary_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected)
