"""Domain exceptions, mapped to HTTP responses by src.api.errors."""

from __future__ import annotations

from typing import Any


class OdaryError(Exception):
    """Base exception for the Odary API."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(OdaryError):
    """Requested resource was not found."""

    pass


class BusinessRuleError(OdaryError):
    """The request is well-formed but violates a business rule."""

    pass

