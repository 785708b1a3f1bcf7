"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain/application logic and caught by the
presentation layer, which maps them to HTTP status codes or gateway error frames.
"""

from chatline.domain.exceptions.entity_not_found import EntityNotFoundError
from chatline.domain.exceptions.access_denied import AccessDeniedError
from chatline.domain.exceptions.validation_error import DomainValidationError
from chatline.domain.exceptions.unauthorized import UnauthorizedError
from chatline.domain.exceptions.store_unavailable import StoreUnavailableError
from chatline.domain.exceptions.payload_too_large import PayloadTooLargeError

__all__ = [
    "EntityNotFoundError",
    "AccessDeniedError",
    "DomainValidationError",
    "UnauthorizedError",
    "StoreUnavailableError",
    "PayloadTooLargeError",
]
