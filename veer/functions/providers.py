"""
Upstream API clients used by the chat function.

Every call goes through HTTPClientAdapterFactory so tests can hand in an
httpx.MockTransport via ``client_kwargs``.
"""
import logging
from typing import Any, Dict, List, Optional

from veer.adapters.http_client import HTTPClientAdapterFactory, HTTPResponse, RequestError
from veer.exceptions import UpstreamError

logger = logging.getLogger(__name__)

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_MODEL = "gpt-4o-mini"
GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
GATEWAY_MODEL = "google/gemini-2.5-flash"
WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
ENWS_URL = "https://api.enws.example/v1/search"

TEMPERATURE = 0.7
MAX_TOKENS = 1000


def extract_reply(data: Dict[str, Any]) -> str:
    """First choice's message content, or its text, or an empty string."""
    choices = data.get("choices") or []
    if not choices:
        return ""
    first = choices[0] or {}
    message = first.get("message") or {}
    return message.get("content") or first.get("text") or ""


class ProviderClient:
    """Thin wrapper over the async HTTP client for each upstream provider."""

    def __init__(self, timeout: Optional[float] = 30.0, client_kwargs: Optional[Dict[str, Any]] = None):
        self.timeout = timeout
        self.client_kwargs = client_kwargs or {}

    async def _request(self, provider: str, method: str, url: str, **kwargs) -> HTTPResponse:
        try:
            async with HTTPClientAdapterFactory.create_async_client(
                timeout=self.timeout, **self.client_kwargs
            ) as client:
                if method == "POST":
                    response = await client.post(url, **kwargs)
                else:
                    response = await client.get(url, **kwargs)
        except RequestError as e:
            logger.error(f"{provider} unreachable: {e}")
            raise UpstreamError(provider, original_error=e) from e

        if not response.ok:
            logger.error(
                f"{provider} error",
                extra={"status_code": response.status_code, "body": response.text[:500]},
            )
            raise UpstreamError(provider, upstream_status=response.status_code)
        return response

    async def chat_completion(
        self,
        provider: str,
        url: str,
        api_key: str,
        model: str,
        messages: List[Dict[str, Any]],
    ) -> str:
        """
        Call an OpenAI-compatible chat completions endpoint.

        Returns:
            Reply text of the first choice
        """
        response = await self._request(
            provider,
            "POST",
            url,
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
            json={
                "model": model,
                "messages": messages,
                "temperature": TEMPERATURE,
                "max_tokens": MAX_TOKENS,
            },
        )
        return extract_reply(response.json())

    async def current_weather(self, api_key: str, location: str) -> Any:
        response = await self._request(
            "Weather API",
            "GET",
            WEATHER_URL,
            params={"q": location, "appid": api_key, "units": "metric"},
        )
        return response.json()

    async def enws_search(self, api_key: str, query: str) -> Any:
        response = await self._request(
            "ENWS API",
            "GET",
            ENWS_URL,
            params={"q": query},
            headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
        )
        return response.json()
