# app/errors.py
"""Exceptions raised by the offer service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


class OfferServiceError(Exception):
    """Base exception for all offer service errors."""


class ConfigError(OfferServiceError):
    """Configuration is invalid or missing."""


class AuthorizationError(OfferServiceError):
    """The x-api-key header is missing or does not match."""


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class ValidationError(OfferServiceError):
    """The request body violates one or more field constraints."""

    def __init__(self, details: List[FieldError]):
        self.details = list(details)
        summary = ", ".join(f"{d.field}: {d.message}" for d in self.details)
        super().__init__(f"Validation failed ({summary})")


class RenderError(OfferServiceError):
    """Building or rendering the PDF document failed."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
