"""Tests for portfolio_cms.core.errors module."""

import pytest

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
    categorize_error,
    is_retryable,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.feed is None
        assert ctx.url is None
        assert ctx.metadata == {}
        assert ctx.to_dict() == {}

    def test_to_dict_only_includes_set_fields(self):
        ctx = ErrorContext(feed="tiles", http_status=503, metadata={"attempt": 2})
        assert ctx.to_dict() == {"feed": "tiles", "http_status": 503, "attempt": 2}


class TestPortfolioError:
    """Test the base error."""

    def test_defaults(self):
        error = PortfolioError("boom")
        assert error.message == "boom"
        assert str(error) == "boom"
        assert error.category == ErrorCategory.INTERNAL
        assert error.retryable is False
        assert error.cause is None

    def test_explicit_category_and_retry(self):
        error = PortfolioError("boom", category=ErrorCategory.NETWORK, retryable=True, retry_after=30)
        assert error.category == ErrorCategory.NETWORK
        assert error.retryable is True
        assert error.to_dict()["retry_after"] == 30

    def test_cause_is_chained(self):
        original = ValueError("bad value")
        error = PortfolioError("wrapped", cause=original)
        assert error.cause is original
        assert error.__cause__ is original
        assert error.to_dict()["cause"] == "bad value"

    def test_with_context_sets_known_fields_and_metadata(self):
        error = PortfolioError("boom").with_context(feed="tiles", url="https://x.example", attempt=3)
        assert error.context.feed == "tiles"
        assert error.context.url == "https://x.example"
        assert error.context.metadata == {"attempt": 3}

    def test_with_context_returns_same_instance(self):
        error = SourceError("boom")
        assert error.with_context(feed="tiles") is error

    def test_to_dict(self):
        error = FeedUnavailableError("Feed returned HTTP 503").with_context(http_status=503)
        data = error.to_dict()
        assert data["error_type"] == "FeedUnavailableError"
        assert data["category"] == "SOURCE"
        assert data["retryable"] is True
        assert data["context"] == {"http_status": 503}

    def test_repr(self):
        error = FeedUnavailableError("Sheet returned 503")
        assert repr(error) == "FeedUnavailableError('Sheet returned 503', category=SOURCE)"


class TestErrorHierarchy:
    """Test categories and retry semantics of subclasses."""

    @pytest.mark.parametrize(
        ("error_class", "category", "retryable"),
        [
            (SourceError, ErrorCategory.SOURCE, False),
            (SourceNotFoundError, ErrorCategory.SOURCE, False),
            (FeedUnavailableError, ErrorCategory.SOURCE, True),
            (ParseError, ErrorCategory.PARSE, False),
            (ValidationError, ErrorCategory.VALIDATION, False),
            (ConfigError, ErrorCategory.CONFIG, False),
        ],
    )
    def test_defaults(self, error_class, category, retryable):
        error = error_class("x")
        assert isinstance(error, PortfolioError)
        assert error.category == category
        assert error.retryable is retryable

    def test_feed_errors_are_source_errors(self):
        assert issubclass(FeedUnavailableError, SourceError)
        assert issubclass(SourceNotFoundError, SourceError)
        assert issubclass(ParseError, SourceError)

    def test_validation_error_field_and_value(self):
        error = ValidationError("bad size", field="size", value="huge")
        data = error.to_dict()
        assert data["field"] == "size"
        assert data["value"] == "'huge'"


class TestUtilities:
    def test_is_retryable(self):
        assert is_retryable(FeedUnavailableError("x")) is True
        assert is_retryable(ParseError("x")) is False
        assert is_retryable(ConnectionError()) is True
        assert is_retryable(TimeoutError()) is True
        assert is_retryable(KeyError("x")) is False

    def test_categorize_error(self):
        assert categorize_error(ParseError("x")) == ErrorCategory.PARSE
        assert categorize_error(ConnectionError()) == ErrorCategory.NETWORK
        assert categorize_error(ValueError()) == ErrorCategory.VALIDATION
        assert categorize_error(KeyError("x")) == ErrorCategory.UNKNOWN
