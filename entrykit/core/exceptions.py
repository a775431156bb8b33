"""
exceptions.py - Error types raised across the engine boundary

Empty filter results and empty rename plans are ordinary values, not errors.
"""

from typing import Optional


class EntryKitError(Exception):
    """Base exception for all entrykit errors."""
    pass


class InvalidPatternError(EntryKitError):
    """Raised when a rename search pattern (or its replacement template) fails to compile."""

    def __init__(self, pattern: str, reason: str, field: str = "search"):
        self.pattern = pattern
        self.reason = reason
        self.field = field
        super().__init__(f"Invalid regex provided: {reason}")


class ListingError(EntryKitError):
    """Raised when a listing row cannot be turned into a Record."""
    pass


class EmptySubmissionError(EntryKitError):
    """Raised when a destructive request would be sent with nothing to act on."""
    pass


class ExternalServiceError(EntryKitError):
    """Raised for non-2xx or malformed responses from AniList, TMDB or the backend."""

    def __init__(self, status: int, message: Optional[str] = None, service: str = "API"):
        self.status = status
        self.message = message
        self.service = service
        if message:
            text = message
        else:
            text = f"{service} returned {status}"
        super().__init__(text)
