"""
DomainValidationError - Raised for malformed submissions (self-send, empty message).
Maps to: HTTP 400 Bad Request / gateway code "invalid_argument"
"""


class DomainValidationError(Exception):
    """Exception raised for domain validation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
