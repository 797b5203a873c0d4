"""
Search Exceptions
Error taxonomy raised by the search layer.
"""

from typing import Optional


class SearchServiceError(Exception):
    """Base exception for search layer errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(SearchServiceError):
    """Raised when caller input is missing or malformed."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details)
        self.field = field


class InvalidFilter(ValidationError):
    """Raised when a structured filter value cannot be parsed."""


class EmbeddingUnavailable(SearchServiceError):
    """Raised when the embedding service fails or times out."""


class PersistenceError(SearchServiceError):
    """Raised when a database query fails."""
