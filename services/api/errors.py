"""
Error taxonomy for weather and place lookups.

Every error carries a stable machine code (used in the API envelope) and the
HTTP status the API layer should answer with.

  ValidationError        malformed / oversized / disallowed-character input
  ProviderError          anything that went wrong talking to a provider
    NotFoundError        provider reports an unknown place
    AuthError            bad or missing provider credential
    RateLimitedError     provider quota exceeded (caller may retry later)
    UpstreamTimeoutError provider did not answer within the request timeout
    UnknownUpstreamError catch-all for other upstream failures
      PayloadError       2xx answer whose body does not match the provider schema

Cache failures are deliberately absent: the cache is fail-open and never
produces an error for callers.
"""

from __future__ import annotations


class WeatherServiceError(Exception):
    """Base class for all errors surfaced by the service."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(WeatherServiceError):
    """Input rejected before any cache or network access."""

    code = "VALIDATION_ERROR"
    status_code = 422


class ProviderError(WeatherServiceError):
    """A call to a third-party provider failed."""

    code = "UPSTREAM_ERROR"
    status_code = 502

    def __init__(self, message: str, provider: str = "unknown") -> None:
        super().__init__(message)
        self.provider = provider


class NotFoundError(ProviderError):
    code = "NOT_FOUND"
    status_code = 404


class AuthError(ProviderError):
    code = "UPSTREAM_AUTH_FAILED"
    status_code = 502


class RateLimitedError(ProviderError):
    code = "UPSTREAM_RATE_LIMITED"
    status_code = 503

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        retry_after_s: float | None = None,
    ) -> None:
        super().__init__(message, provider)
        self.retry_after_s = retry_after_s


class UpstreamTimeoutError(ProviderError):
    code = "UPSTREAM_TIMEOUT"
    status_code = 504


class UnknownUpstreamError(ProviderError):
    code = "UPSTREAM_ERROR"
    status_code = 502


class PayloadError(UnknownUpstreamError):
    """Provider answered successfully but with a body we cannot read."""

    code = "UPSTREAM_BAD_PAYLOAD"
