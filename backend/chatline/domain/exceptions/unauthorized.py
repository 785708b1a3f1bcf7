"""
UnauthorizedError - Raised when a credential token is missing or invalid.
Maps to: HTTP 401 Unauthorized / WebSocket close 1008 before accept
"""


class UnauthorizedError(Exception):
    """Raised when credentials cannot be verified. Never retried."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
