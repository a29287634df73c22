"""Errors raised by rendering operations."""

from __future__ import annotations

__all__ = [
    "PietError",
    "InvalidInputError",
    "NotSupportedError",
    "UnimplementedError",
    "MissingFeatureError",
    "StackUnbalanceError",
    "BackendError",
    "MissingFontError",
    "FontLoadingFailedError",
]


class PietError(Exception):
    """Base class of all rendering errors."""

    default_message = "Rendering error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class InvalidInputError(PietError):
    """A function was passed an invalid input."""

    default_message = "Invalid input"


class NotSupportedError(PietError):
    """Something is impossible on the current platform."""

    default_message = "Not supported on the current backend"


class UnimplementedError(PietError):
    """Something is possible, but not yet implemented."""

    default_message = "This functionality is not yet implemented for this backend"


class MissingFeatureError(PietError):
    """A required optional feature is unavailable."""

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"Missing feature '{feature}'")


class StackUnbalanceError(PietError):
    """A stack pop failed."""

    default_message = "Stack unbalanced"


class BackendError(PietError):
    """The backend failed unexpectedly."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        super().__init__(f"Backend error: {error}")


class MissingFontError(PietError):
    """A font could not be found."""

    default_message = "A font could not be found"


class FontLoadingFailedError(PietError):
    """Font data could not be loaded."""

    default_message = "A font could not be loaded"