from __future__ import annotations

from typing import Optional


class DigestError(Exception):
    """Base class for every failure that aborts a digest run."""


class FetchError(DigestError):
    """Raised when a news feed cannot be fetched or parsed."""

    def __init__(self, message: str, *, subject: Optional[str] = None) -> None:
        super().__init__(message)
        self.subject = subject


class SummarizationError(DigestError):
    """Raised when the summarizer is unavailable or returns no usable text."""


class DeliveryError(DigestError):
    """Raised when the push transport rejects a message."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        body: str = "",
        chunk_index: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body
        self.chunk_index = chunk_index


class ConfigurationError(DigestError):
    """Raised when required settings are missing, malformed or conflicting."""
