"""
Shared plumbing for outbound provider calls.

Each provider client owns a base URL and an API key and borrows one
application-wide httpx.AsyncClient (connection pooling). The response body is
parsed into the provider's own pydantic payload model right here, so nothing
downstream ever touches raw dicts.

HTTP outcome -> error:
  401 / 403                AuthError
  404                      NotFoundError
  429                      RateLimitedError (Retry-After honoured when numeric)
  other >= 400             UnknownUpstreamError
  httpx.TimeoutException   UpstreamTimeoutError
  other httpx.HTTPError    UnknownUpstreamError
  body fails schema        PayloadError
"""

from __future__ import annotations

import enum
import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from services.api.errors import (
    AuthError,
    NotFoundError,
    PayloadError,
    ProviderError,
    RateLimitedError,
    UnknownUpstreamError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class ProviderKind(str, enum.Enum):
    OPENWEATHER = "openweather"
    GEOAPIFY = "geoapify"
    BBC = "bbc"


def _retry_after(response: httpx.Response) -> float | None:
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class ProviderClient:
    """Base class — subclasses set `kind` and build the query parameters."""

    kind: ProviderKind
    not_found_label = "Place"

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        timeout_s: float = 8.0,
    ) -> None:
        self._http = http
        self._base_url = base_url
        self._api_key = api_key
        self._timeout_s = timeout_s

    @property
    def provider(self) -> str:
        return self.kind.value

    async def _get_json(self, params: dict[str, Any], model: type[M], subject: str) -> M:
        """
        GET base_url with params and parse the body into `model`.

        `subject` is the user-facing thing being looked up (city or query);
        it is used in error messages and logs. The API key never is.
        """
        if not self._api_key:
            logger.warning("%s API key not set; refusing to call provider for %r", self.provider, subject)
            raise AuthError(f"{self.provider} API key is not configured", provider=self.provider)

        try:
            response = await self._http.get(self._base_url, params=params, timeout=self._timeout_s)
        except httpx.TimeoutException as exc:
            logger.warning("%s timed out after %.1fs for %r", self.provider, self._timeout_s, subject)
            raise UpstreamTimeoutError(
                f"{self.provider} did not respond within {self._timeout_s:g}s",
                provider=self.provider,
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("%s request failed for %r: %s", self.provider, subject, type(exc).__name__)
            raise UnknownUpstreamError(
                f"{self.provider} request failed ({type(exc).__name__})",
                provider=self.provider,
            ) from exc

        if response.status_code >= 400:
            logger.warning(
                "%s returned %d for %r: %s",
                self.provider,
                response.status_code,
                subject,
                response.text[:200],
            )
            raise self._error_for_status(response, subject)

        try:
            return model.model_validate_json(response.content)
        except PydanticValidationError as exc:
            logger.warning("%s payload for %r failed validation: %d errors", self.provider, subject, exc.error_count())
            raise PayloadError(
                f"{self.provider} returned an unexpected payload",
                provider=self.provider,
            ) from exc

    def _error_for_status(self, response: httpx.Response, subject: str) -> ProviderError:
        status = response.status_code
        if status in (401, 403):
            return AuthError(f"{self.provider} rejected the API key", provider=self.provider)
        if status == 404:
            return NotFoundError(f'{self.not_found_label} "{subject}" not found', provider=self.provider)
        if status == 429:
            return RateLimitedError(
                f"{self.provider} rate limit exceeded",
                provider=self.provider,
                retry_after_s=_retry_after(response),
            )
        return UnknownUpstreamError(f"{self.provider} returned HTTP {status}", provider=self.provider)
