"""
Error taxonomy for the extraction pipelines.

Call-boundary errors (ValidationError, ConfigurationError, UpstreamError,
ParseError for bulk generation) propagate to the request handlers.
RowCorruptionError is raised per table row and absorbed by the row mapper.
"""

from __future__ import annotations

from typing import Optional


class ExtractionError(RuntimeError):
    """Base class for all pipeline errors."""


class ValidationError(ExtractionError):
    """Raised when required request input is missing or malformed."""


class ConfigurationError(ExtractionError):
    """Raised when the LLM service credentials are not configured."""


class UpstreamError(ExtractionError):
    """Raised when the text-generation service call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details or message


class UpstreamTransientError(UpstreamError):
    """Rate-limit (429) or service-unavailable (503) failure; eligible for one retry."""


class UpstreamFatalError(UpstreamError):
    """Terminal upstream failure, including a transient one that survived the retry."""


class ParseError(ExtractionError):
    """Raised when a reply holds neither a recognizable table nor a JSON array."""


class RowCorruptionError(ExtractionError):
    """Raised for a single table row that fails validation."""
