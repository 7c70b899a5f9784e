"""Portfolio CMS core -- errors, logging, settings and reject records.

Architecture::

    errors.py          Structured error hierarchy (PortfolioError, FeedUnavailableError)
    logging.py         structlog configuration and context helpers
    settings.py        PortfolioSettings (pydantic-settings, PORTFOLIO_ prefix)
    rejects.py         Reject records for dropped source rows
"""

from portfolio_cms.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    FeedUnavailableError,
    ParseError,
    PortfolioError,
    SourceError,
    SourceNotFoundError,
    ValidationError,
)
from portfolio_cms.core.rejects import Reject

__all__ = [
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "FeedUnavailableError",
    "ParseError",
    "PortfolioError",
    "Reject",
    "SourceError",
    "SourceNotFoundError",
    "ValidationError",
]
