"""
Adapter for HTTP client library (httpx).
Isolates httpx-specific imports so upstream clients and the CLI share one seam
(and tests can inject an ``httpx.MockTransport``).
"""
from typing import Optional, Any

import httpx


class HTTPResponse:
    """Abstracted HTTP response interface."""

    def __init__(self, response):
        """Initialize with underlying response object."""
        self._response = response

    @property
    def status_code(self) -> int:
        """Get HTTP status code."""
        return self._response.status_code

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self._response.status_code < 300

    def raise_for_status(self) -> None:
        """Raise exception if status code indicates error."""
        self._response.raise_for_status()

    def json(self) -> Any:
        """Parse response as JSON."""
        return self._response.json()

    @property
    def text(self) -> str:
        """Get response content as text."""
        return self._response.text


class HttpxClientAdapter:
    """Synchronous httpx client, used by the CLI."""

    def __init__(self, timeout: Optional[float] = None, **kwargs):
        self._client = httpx.Client(timeout=timeout, **kwargs)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._client.close()

    def get(self, url: str, **kwargs) -> HTTPResponse:
        """Make GET request."""
        return HTTPResponse(self._client.get(url, **kwargs))

    def post(self, url: str, **kwargs) -> HTTPResponse:
        """Make POST request."""
        return HTTPResponse(self._client.post(url, **kwargs))

    def close(self):
        self._client.close()


class HttpxAsyncClientAdapter:
    """Async httpx client, used by the functions service for upstream APIs."""

    def __init__(self, timeout: Optional[float] = None, **kwargs):
        self._client = httpx.AsyncClient(timeout=timeout, **kwargs)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self._client.aclose()

    async def get(self, url: str, **kwargs) -> HTTPResponse:
        """Make async GET request."""
        response = await self._client.get(url, **kwargs)
        return HTTPResponse(response)

    async def post(self, url: str, **kwargs) -> HTTPResponse:
        """Make async POST request."""
        response = await self._client.post(url, **kwargs)
        return HTTPResponse(response)

    async def aclose(self):
        await self._client.aclose()


class HTTPClientAdapterFactory:
    """Factory for creating HTTP client adapters."""

    @staticmethod
    def create_client(timeout: Optional[float] = None, **kwargs) -> HttpxClientAdapter:
        """Create synchronous HTTP client adapter."""
        return HttpxClientAdapter(timeout=timeout, **kwargs)

    @staticmethod
    def create_async_client(timeout: Optional[float] = None, **kwargs) -> HttpxAsyncClientAdapter:
        """Create async HTTP client adapter.

        Keyword arguments are passed to ``httpx.AsyncClient`` (``transport=``
        is how tests swap in a mock).
        """
        return HttpxAsyncClientAdapter(timeout=timeout, **kwargs)


HTTPError = httpx.HTTPError
HTTPStatusError = httpx.HTTPStatusError
TimeoutException = httpx.TimeoutException
RequestError = httpx.RequestError
