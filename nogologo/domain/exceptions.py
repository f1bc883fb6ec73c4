"""Error Taxonomy - Domain Layer"""

from typing import Optional


class ImageGenerationError(Exception):
    """Base class for every failure surfaced by the generation core."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message or self.__class__.__name__


class NetworkError(ImageGenerationError):
    """Transport-level failure, including timeouts."""
    pass


class HttpError(ImageGenerationError):
    """Provider answered with a status outside 200-299."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class ParseError(ImageGenerationError):
    """Response body is missing or has malformed expected fields."""
    pass


class UnsupportedOperation(ImageGenerationError):
    """Provider or model cannot perform the requested action."""
    pass


class PermissionDenied(ImageGenerationError):
    """Photo library refused write access."""
    pass


class SerializationError(ImageGenerationError):
    """Request body could not be encoded."""
    pass


class PersistenceError(ImageGenerationError):
    """Local persistence (credentials, config, photos) failed."""
    pass
