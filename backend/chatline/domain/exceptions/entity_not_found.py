"""
EntityNotFoundError - Raised when a requested user or conversation does not exist.
Maps to: HTTP 404 Not Found / gateway code "not_found"
"""


class EntityNotFoundError(Exception):
    """Exception raised when a requested entity is not found."""

    def __init__(self, message: str = "The requested entity was not found."):
        super().__init__(message)
