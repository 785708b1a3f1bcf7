"""
StoreUnavailableError - Transient failure of the durable store (timeout, lost connection).
Maps to: HTTP 503 Service Unavailable / gateway code "unavailable"

This is the only error class the server retries on its own.
"""


class StoreUnavailableError(Exception):
    """Raised when the durability layer times out or cannot be reached."""

    def __init__(self, message: str = "Message store is temporarily unavailable"):
        super().__init__(message)
