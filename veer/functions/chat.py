"""
Chat function: builds the conversation for a mode and routes it to a provider.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from veer.config import Settings
from veer.exceptions import ConfigurationError, ValidationError
from veer.functions import providers
from veer.functions.prompts import system_prompt_for

logger = logging.getLogger(__name__)


def build_messages(
    message: Optional[str],
    mode: Optional[str],
    history: Optional[List[Dict[str, Any]]] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """System prompt, then prior turns (role/content only), then the new user message."""
    messages = [{"role": "system", "content": system_prompt_for(mode, now)}]
    for entry in history or []:
        messages.append({"role": entry.get("role"), "content": entry.get("content")})
    messages.append({"role": "user", "content": message})
    return messages


class ChatService:
    """Answers a chat request with OpenAI, the gateway, or a data tool."""

    def __init__(self, settings: Settings, client: Optional[providers.ProviderClient] = None):
        self.settings = settings
        self.client = client or providers.ProviderClient(timeout=settings.upstream_timeout_seconds)

    def select_service(self, service: Optional[str]) -> str:
        """
        Resolve the requested service name.

        ``auto`` prefers OpenAI, then the gateway; with neither key it
        resolves to ``none``, which takes the gateway path and fails there.
        """
        service = service or "auto"
        if service != "auto":
            return service
        if self.settings.openai_api_key:
            return "openai"
        if self.settings.lovable_api_key:
            return "lovable"
        return "none"

    async def reply(
        self,
        message: Optional[str],
        mode: Optional[str] = None,
        history: Optional[List[Dict[str, Any]]] = None,
        service: Optional[str] = "auto",
        location: Optional[str] = None,
        query: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Produce a reply.

        Returns:
            ``{"reply": ..., "tool": "openai" | "weather" | "enws" | "lovable"}``

        Raises:
            ConfigurationError: The chosen provider has no API key
            ValidationError: weather/enws called without location/query
            UpstreamError: The provider answered non-2xx or was unreachable
        """
        effective = self.select_service(service)
        messages = build_messages(message, mode, history)
        logger.info("Chat request", extra={"mode": mode, "service": effective, "turns": len(messages)})

        if effective == "openai":
            if not self.settings.openai_api_key:
                raise ConfigurationError("OPENAI_API_KEY")
            reply = await self.client.chat_completion(
                "OpenAI",
                providers.OPENAI_URL,
                self.settings.openai_api_key,
                providers.OPENAI_MODEL,
                messages,
            )
            return {"reply": reply, "tool": "openai"}

        if effective == "weather":
            if not self.settings.weather_api_key:
                raise ConfigurationError("WEATHER_API_KEY")
            if not location:
                raise ValidationError("location is required for weather service", field="location")
            data = await self.client.current_weather(self.settings.weather_api_key, location)
            return {"reply": data, "tool": "weather"}

        if effective == "enws":
            if not self.settings.enws_api_key:
                raise ConfigurationError("ENWS_API_KEY")
            if not query:
                raise ValidationError("query is required for enws service", field="query")
            data = await self.client.enws_search(self.settings.enws_api_key, query)
            return {"reply": data, "tool": "enws"}

        if not self.settings.lovable_api_key:
            raise ConfigurationError("LOVABLE_API_KEY")
        reply = await self.client.chat_completion(
            "Lovable",
            providers.GATEWAY_URL,
            self.settings.lovable_api_key,
            providers.GATEWAY_MODEL,
            messages,
        )
        return {"reply": reply, "tool": "lovable"}
