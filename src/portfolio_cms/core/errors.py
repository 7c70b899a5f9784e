"""
Structured error types for the portfolio content pipeline.

The parsing core (tokenizer, normalizer, markdown renderer) is designed to
degrade rather than raise: malformed quoting, bad numbers and unsafe links
are absorbed and recorded. Errors therefore live at the edges of the system,
where a feed is fetched or a document cannot be decoded at all, and those
edges need typed, context-carrying exceptions so that a caller can report a
single "feed unavailable" condition instead of a raw transport traceback.

Manifesto:
    - **Typed Error Hierarchy:** Different error types for different failure domains
    - **Explicit Retry Semantics:** Each error knows if it's retryable
    - **Rich Context:** Errors carry url/status/source metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     PortfolioError                        │
        │     (category, retryable, retry_after, context, cause)   │
        ├──────────────────────────────────────────────────────────┤
        │  SourceError            ValidationError    ConfigError    │
        │  (SOURCE)               (VALIDATION)       (CONFIG)       │
        │     │                                                     │
        │  SourceNotFoundError                                      │
        │  FeedUnavailableError (retryable)                         │
        │  ParseError (PARSE)                                       │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = FeedUnavailableError("Sheet returned 503")
    >>> error.retryable
    True
    >>> error.with_context(url="https://docs.google.com/...", http_status=503)
    FeedUnavailableError('Sheet returned 503', category=SOURCE)

Tags:
    error-handling, exception-hierarchy, error-context, portfolio-cms
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification and routing.

    String enum so that categories serialize as readable values in
    structured logs.
    """

    NETWORK = "NETWORK"
    SOURCE = "SOURCE"
    PARSE = "PARSE"
    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Typed fields cover what the feed layer knows when something goes wrong
    (which feed, which URL, which HTTP status, which line of the source).
    Anything else goes into ``metadata``. ``to_dict()`` serializes only the
    fields that are set.

    Attributes:
        feed: Logical feed name ("tiles", "experiences")
        lane: Lane being loaded or queried, if relevant
        source_name: Where the text came from (file path or URL label)
        url: URL that was being accessed
        http_status: HTTP status code if applicable
        line_number: Line number in the source text if applicable
        metadata: Additional key-value pairs
    """

    feed: str | None = None
    lane: str | None = None
    source_name: str | None = None
    url: str | None = None
    http_status: int | None = None
    line_number: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["feed", "lane", "source_name", "url", "http_status", "line_number"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class PortfolioError(Exception):
    """
    Base exception for all portfolio-cms errors.

    Subclasses set ``default_category`` and ``default_retryable`` so that
    raising sites only pass what is specific to the failure.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        retry_after: int | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.retry_after = retry_after
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> PortfolioError:
        """
        Add context to this error (fluent API).

        Usage:
            raise FeedUnavailableError("Failed").with_context(
                feed="tiles",
                url="https://docs.google.com/spreadsheets/...",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.retry_after is not None:
            result["retry_after"] = self.retry_after
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceError(PortfolioError):
    """
    Error from a content source (spreadsheet export, JSON file).

    Default not retryable. Subclasses may override for specific cases.
    """

    default_category = ErrorCategory.SOURCE
    default_retryable = False


class SourceNotFoundError(SourceError):
    """Source document not found (missing file, 404)."""

    pass


class FeedUnavailableError(SourceError):
    """
    The feed could not be retrieved as a complete document.

    This is the single condition surfaced to the display layer when a fetch
    fails. The prior snapshot stays installed.
    """

    default_retryable = True


class ParseError(SourceError):
    """The feed text could not be decoded as a document at all."""

    default_category = ErrorCategory.PARSE
    default_retryable = False


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(PortfolioError):
    """
    Data validation error.

    Never retryable - data must be fixed.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(PortfolioError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: Exception) -> bool:
    """Check if an error is retryable."""
    if isinstance(error, PortfolioError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, PortfolioError):
        return error.category
    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorCategory.NETWORK
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "PortfolioError",
    "SourceError",
    "SourceNotFoundError",
    "FeedUnavailableError",
    "ParseError",
    "ValidationError",
    "ConfigError",
    "is_retryable",
    "categorize_error",
]
