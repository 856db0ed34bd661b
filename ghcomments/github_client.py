"""Async GitHub API client with retry and pagination helpers."""

import logging
from contextlib import aclosing
from types import TracebackType
from typing import Any, Self, TYPE_CHECKING, TypeVar, cast
from collections.abc import AsyncIterator, Callable, Mapping

import httpx
import pendulum
from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

if TYPE_CHECKING:
    from ghcomments.config import AppSettings

LOGGER = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_RETRY_FAILURE_MESSAGE = "GitHub API request failed after retries"
_FORBIDDEN_STATUS = 403
_NOT_FOUND_STATUS = 404
_RATE_LIMIT_STATUS = 429
_SERVER_ERROR_LOWER = 500
_SERVER_ERROR_UPPER = 600
_NON_IDEMPOTENT_METHODS = frozenset({"POST"})
_UNEXPECTED_PAYLOAD_MESSAGE = "Unexpected response payload type"


class RateLimitError(RuntimeError):
    """Raised when the GitHub API responds with a rate limit status."""

    def __init__(self, retry_after: float | None = None) -> None:
        """Store the retry delay suggested by the server."""
        super().__init__("GitHub API rate limit encountered")
        self.retry_after = 1.0 if retry_after is None else retry_after


class GitHubAPIError(RuntimeError):
    """Raised when the GitHub API returns a non-retryable error."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Attach HTTP status metadata to the exception instance."""
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(GitHubAPIError):
    """Raised when the requested GitHub resource does not exist."""


class GitHubClient:
    """High-level asynchronous connection to the GitHub REST API."""

    def __init__(self, settings: "AppSettings") -> None:
        """Configure the HTTP client with authentication headers and retry policy."""
        self._settings = settings
        headers = {
            "User-Agent": settings.user_agent,
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": settings.api_version,
        }
        token = settings.github_token.get_secret_value()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=str(settings.github_api_base),
            headers=headers,
            timeout=httpx.Timeout(settings.timeout),
        )
        self._max_attempts = settings.max_attempts

    async def __aenter__(self) -> Self:
        """Enter the async context manager and return the client."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Ensure the underlying HTTP client is closed when exiting the context."""
        del exc_type, exc, tb
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Perform an HTTP request with retry and rate limit handling.

        ``POST`` requests are attempted once since GitHub may have created the
        resource even when the response was lost.
        """
        attempts = 1 if method.upper() in _NON_IDEMPOTENT_METHODS else self._max_attempts
        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            retry=retry_if_exception_type((RateLimitError, httpx.HTTPStatusError, httpx.TransportError)),
            wait=_rate_limit_aware(wait_exponential_jitter(initial=1, max=10)),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    LOGGER.debug("%s %s", method, path)
                    response = await self._client.request(
                        method,
                        path,
                        params=params,
                        json=json,
                        headers=headers,
                    )
                    if _is_rate_limited(response):
                        retry_after = _retry_after(response)
                        LOGGER.warning("Rate limit hit, server asks to wait %ss", retry_after)
                        raise RateLimitError(retry_after)
                    try:
                        response.raise_for_status()
                    except httpx.HTTPStatusError as exc:
                        status_code = exc.response.status_code
                        if _SERVER_ERROR_LOWER <= status_code < _SERVER_ERROR_UPPER:
                            raise
                        error_message = f"GitHub API returned {status_code}: {exc.response.text}"
                        error_type = NotFoundError if status_code == _NOT_FOUND_STATUS else GitHubAPIError
                        raise error_type(error_message, status_code=status_code) from exc
                    return response
        except RetryError as exc:  # pragma: no cover - reraise=True surfaces the last error
            raise GitHubAPIError(_RETRY_FAILURE_MESSAGE) from exc
        raise GitHubAPIError(_RETRY_FAILURE_MESSAGE)

    async def paginate(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Iterate over paginated GitHub API responses following ``Link`` headers."""
        current_params: dict[str, Any] | None = {"per_page": self._settings.per_page}
        if params:
            current_params.update(params)

        url = path
        while True:
            response = await self.request(method, url, params=current_params, headers=headers)
            payload = self.parse_json(response)
            if not isinstance(payload, list):
                raise GitHubAPIError(_UNEXPECTED_PAYLOAD_MESSAGE, status_code=response.status_code)
            for item in cast("list[dict[str, Any]]", payload):
                yield item
            next_url = response.links.get("next", {}).get("url")
            if not next_url:
                break
            LOGGER.debug("Following next page %s", next_url)
            # The next link already carries every query parameter.
            url = next_url
            current_params = None

    async def get_all_pages(
        self,
        path: str,
        model: type[ModelT],
        *,
        params: Mapping[str, Any] | None = None,
    ) -> AsyncIterator[ModelT]:
        """Yield every item of a paginated GET endpoint hydrated into ``model``."""
        async with aclosing(self.paginate("GET", path, params=params)) as payloads:
            async for payload in payloads:
                yield model.model_validate(payload)

    def parse_json(self, response: httpx.Response) -> Any:
        """Decode a JSON response or raise a GitHubAPIError on failure."""
        try:
            return response.json()
        except ValueError as exc:
            content_type = response.headers.get("Content-Type", "unknown")
            message = (
                "GitHub API returned an invalid JSON payload "
                f"(status {response.status_code}, content-type {content_type})"
            )
            raise GitHubAPIError(message, status_code=response.status_code) from exc


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == _RATE_LIMIT_STATUS:
        return True
    return (
        response.status_code == _FORBIDDEN_STATUS
        and response.headers.get("X-RateLimit-Remaining") == "0"
    )


def _retry_after(response: httpx.Response) -> float:
    """Return the delay GitHub asks for before the next attempt."""
    value = response.headers.get("Retry-After")
    if value:
        try:
            return max(float(value), 0.0)
        except ValueError:
            LOGGER.debug("Ignoring non-numeric Retry-After header %r", value)
    reset = response.headers.get("X-RateLimit-Reset")
    if reset and response.headers.get("X-RateLimit-Remaining") == "0":
        try:
            return max(float(reset) - pendulum.now("UTC").timestamp(), 1.0)
        except ValueError:
            LOGGER.debug("Ignoring non-numeric X-RateLimit-Reset header %r", reset)
    return 1.0


def _rate_limit_aware(backoff: Callable[[RetryCallState], float]) -> Callable[[RetryCallState], float]:
    """Wait for the server-provided delay after a rate limit, otherwise back off."""

    def wait(retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        if outcome is not None and outcome.failed:
            error = outcome.exception()
            if isinstance(error, RateLimitError):
                return error.retry_after
        return backoff(retry_state)

    return wait
