"""
PayloadTooLargeError - Raised when an upload exceeds the configured size limit.
Maps to: HTTP 413 Payload Too Large
"""

from chatline.domain.exceptions.validation_error import DomainValidationError


class PayloadTooLargeError(DomainValidationError):
    pass
