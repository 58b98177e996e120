"""HTTP client service with optional retry logic and timeout handling."""

import asyncio
from typing import Any

import httpx
import structlog

from .errors import NetworkError, get_error_service

log = structlog.stdlib.get_logger()


class HttpClientService:
    """Thin async HTTP client: JSON GETs, optional retries, uniform transport errors."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_retries: int = 0,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client service.

        Args:
            timeout: Request timeout in seconds
            max_retries: Retry attempts for 5xx and connection failures (0 = none)
            base_delay: Base delay for exponential backoff in seconds
            max_delay: Maximum delay between retries in seconds
            transport: Optional transport override (used by tests)
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={
                "User-Agent": "PlayHub-TUI/1.0",
                "Accept": "application/json",
            },
            follow_redirects=True,
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            transport=transport,
        )

        log.info(
            "HTTP client service initialized",
            timeout=timeout,
            max_retries=max_retries,
        )

    async def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make a GET request.

        Args:
            url: The URL to request
            params: Optional query parameters
            headers: Optional additional headers

        Returns:
            HTTP response object with a 2xx status

        Raises:
            NetworkError: On any transport failure or non-2xx status
        """
        for attempt in range(self.max_retries + 1):
            try:
                log.debug(
                    "Making HTTP GET request",
                    url=url,
                    attempt=attempt + 1,
                    max_attempts=self.max_retries + 1,
                )

                response = await self._client.get(url, params=params, headers=headers)
                response.raise_for_status()

                log.debug(
                    "HTTP GET request successful",
                    url=url,
                    status_code=response.status_code,
                    content_length=len(response.content),
                )

                return response

            except (httpx.HTTPStatusError, httpx.RequestError) as e:
                log.warning(
                    "HTTP GET request failed",
                    url=url,
                    attempt=attempt + 1,
                    error=(
                        f"HTTP {e.response.status_code}"
                        if isinstance(e, httpx.HTTPStatusError) else str(e)
                    ),
                    error_type=type(e).__name__,
                )

                # Client errors are never retried
                retryable = not (
                    isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500
                )

                if not retryable or attempt == self.max_retries:
                    raise self._to_network_error(e, url) from e

                delay = min(self.base_delay * (2 ** attempt), self.max_delay)
                log.info("Retrying after delay", delay=delay)
                await asyncio.sleep(delay)

        raise RuntimeError("Unexpected end of retry loop")

    async def get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> Any:
        """GET a URL and decode its JSON body.

        Raises:
            NetworkError: On transport failure, non-2xx status or an undecodable body
        """
        response = await self.get(url, params=params)
        try:
            return response.json()
        except ValueError as e:
            log.error("Response body is not valid JSON", url=url, error=str(e))
            raise NetworkError(
                message="The game database returned an unreadable response.",
                original_error=e,
                url=url,
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _to_network_error(error: Exception, url: str) -> NetworkError:
        converted = get_error_service().convert(error, "http_get", "http_client", {"url": url})
        if isinstance(converted, NetworkError):
            return converted
        return NetworkError(message=converted.message, original_error=error, url=url)

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._client.aclose()
        log.info("HTTP client closed")

    async def __aenter__(self) -> "HttpClientService":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type[Exception] | None, exc_val: Exception | None, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
