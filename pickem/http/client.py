"""
Async HTTP transport for the Steam Web API.

Issues GET / form-encoded POST requests and returns parsed JSON. Failures are
classified into the internal taxonomy: HTTP error statuses through
``map_http_error``, everything below HTTP as ``NetworkError``.
"""
from typing import Any, Dict, Optional

import httpx

from pickem.errors import ApiError, NetworkError, PickEmFailure, RateLimitError, map_http_error
from pickem.http.rate_limiter import parse_retry_after
from pickem.utils.observability import Logger, get_metrics

logger = Logger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "pickem/0.1",
    "Accept": "application/json",
}


class AsyncHttpClient:
    """
    Thin JSON-over-HTTP client.

    Example:
        async with AsyncHttpClient() as http:
            data = await http.get(url, {"key": api_key})
    """

    def __init__(
        self,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            timeout: Per-request timeout in seconds
            headers: Extra default headers
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={**DEFAULT_HEADERS, **(headers or {})},
            transport=transport,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        return await self._request("GET", url, params=params)

    async def post(self, url: str, body: Dict[str, str]) -> Any:
        return await self._request("POST", url, data=body)

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        metrics = get_metrics()
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            metrics.api_requests.labels(method=method, status="error").inc()
            failure = NetworkError(str(e) or type(e).__name__, cause=e)
            self._record_failure(failure, method, url)
            raise failure from e

        metrics.api_requests.labels(method=method, status=str(response.status_code)).inc()

        if response.is_error:
            failure = map_http_error(response.status_code, response.reason_phrase)
            if isinstance(failure, RateLimitError):
                failure.retry_after = parse_retry_after(response.headers.get("Retry-After"))
            self._record_failure(failure, method, url)
            raise failure

        try:
            return response.json()
        except ValueError as e:
            failure = NetworkError(f"Invalid JSON response from {url}", cause=e)
            self._record_failure(failure, method, url)
            raise failure from e

    @staticmethod
    def _record_failure(failure: PickEmFailure, method: str, url: str) -> None:
        get_metrics().api_errors.labels(kind=failure.kind.value).inc()
        status = failure.status_code if isinstance(failure, ApiError) else None
        logger.log_warning(
            "api_request_failed",
            method=method,
            url=url,
            kind=failure.kind.value,
            status_code=status,
            error=failure.message,
        )
