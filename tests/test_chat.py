"""
Tests for the chat function: prompts, message assembly and provider routing.
"""
import asyncio
import json
from datetime import UTC, datetime

import httpx
import pytest

from veer.exceptions import ConfigurationError, UpstreamError, ValidationError
from veer.functions import providers
from veer.functions.chat import ChatService, build_messages
from veer.functions.prompts import current_date_string, system_prompt_for

NOW = datetime(2026, 10, 19, 15, 0, tzinfo=UTC)


def completion(text):
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


class RecordingTransport:
    """Collects requests and answers them with a handler."""

    def __init__(self, handler):
        self.requests = []
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def transport(self):
        return httpx.MockTransport(self)


def make_service(settings_factory, handler, **keys):
    recorder = RecordingTransport(handler)
    client = providers.ProviderClient(client_kwargs={"transport": recorder.transport()})
    return ChatService(settings_factory(**keys), client=client), recorder


class TestPrompts:
    def test_date_string(self):
        assert current_date_string(NOW) == "Monday, October 19, 2026"

    def test_prompt_carries_date(self):
        prompt = system_prompt_for("coder", NOW)
        assert prompt.startswith("You are VEER in Coder mode. Today's date is Monday, October 19, 2026.")

    def test_unknown_mode_falls_back_to_helper(self):
        assert system_prompt_for("pirate", NOW) == system_prompt_for("helper", NOW)
        assert system_prompt_for(None, NOW).startswith("You are VEER, a helpful AI assistant.")


class TestBuildMessages:
    def test_order_and_history_fields(self):
        history = [
            {"role": "user", "content": "hi", "id": "m1", "created_at": "x"},
            {"role": "assistant", "content": "hello", "tool_used": "openai"},
        ]
        messages = build_messages("what's up", "tutor", history, NOW)
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        # Only role and content are forwarded
        assert messages[1] == {"role": "user", "content": "hi"}
        assert messages[-1] == {"role": "user", "content": "what's up"}
        assert "Tutor mode" in messages[0]["content"]

    def test_no_history(self):
        assert len(build_messages("hey", None, None, NOW)) == 2


class TestServiceSelection:
    def test_auto_prefers_openai(self, settings_factory):
        service = ChatService(settings_factory(openai_api_key="sk", lovable_api_key="lv"))
        assert service.select_service("auto") == "openai"

    def test_auto_falls_back_to_gateway(self, settings_factory):
        assert ChatService(settings_factory(lovable_api_key="lv")).select_service(None) == "lovable"

    def test_auto_without_keys(self, settings_factory):
        assert ChatService(settings_factory()).select_service("auto") == "none"

    def test_explicit_service_kept(self, settings_factory):
        assert ChatService(settings_factory()).select_service("weather") == "weather"


class TestReply:
    """Tests for routing a chat request to the right upstream."""

    def test_openai(self, settings_factory):
        service, recorder = make_service(
            settings_factory, lambda r: httpx.Response(200, json=completion("Hi there")), openai_api_key="sk-test"
        )
        result = asyncio.run(service.reply("hello", mode="helper"))

        assert result == {"reply": "Hi there", "tool": "openai"}
        request = recorder.requests[0]
        assert str(request.url) == providers.OPENAI_URL
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body["model"] == "gpt-4o-mini"
        assert body["temperature"] == 0.7
        assert body["max_tokens"] == 1000
        assert body["messages"][-1] == {"role": "user", "content": "hello"}

    def test_gateway(self, settings_factory):
        service, recorder = make_service(
            settings_factory, lambda r: httpx.Response(200, json=completion("From gateway")), lovable_api_key="lv"
        )
        result = asyncio.run(service.reply("hello", service="lovable"))
        assert result == {"reply": "From gateway", "tool": "lovable"}
        assert json.loads(recorder.requests[0].content)["model"] == "google/gemini-2.5-flash"

    def test_reply_falls_back_to_text(self, settings_factory):
        service, _ = make_service(
            settings_factory, lambda r: httpx.Response(200, json={"choices": [{"text": "plain"}]}), openai_api_key="sk"
        )
        assert asyncio.run(service.reply("x"))["reply"] == "plain"

    def test_empty_choices(self, settings_factory):
        service, _ = make_service(
            settings_factory, lambda r: httpx.Response(200, json={"choices": []}), openai_api_key="sk"
        )
        assert asyncio.run(service.reply("x"))["reply"] == ""

    def test_missing_openai_key(self, settings_factory):
        service = ChatService(settings_factory(lovable_api_key="lv"))
        with pytest.raises(ConfigurationError) as exc_info:
            asyncio.run(service.reply("x", service="openai"))
        assert exc_info.value.message == "OPENAI_API_KEY not configured"

    def test_no_keys_fails_on_gateway(self, settings_factory):
        with pytest.raises(ConfigurationError) as exc_info:
            asyncio.run(ChatService(settings_factory()).reply("x"))
        assert exc_info.value.message == "LOVABLE_API_KEY not configured"

    def test_upstream_error(self, settings_factory):
        service, _ = make_service(
            settings_factory, lambda r: httpx.Response(429, json={"error": "rate limited"}), openai_api_key="sk"
        )
        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(service.reply("x"))
        assert exc_info.value.message == "OpenAI request failed"
        assert exc_info.value.upstream_status == 429

    def test_upstream_unreachable(self, settings_factory):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        service, _ = make_service(settings_factory, refuse, lovable_api_key="lv")
        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(service.reply("x"))
        assert exc_info.value.message == "Lovable request failed"


class TestDataTools:
    def test_weather(self, settings_factory):
        payload = {"name": "Pune", "main": {"temp": 27.5}}
        service, recorder = make_service(
            settings_factory, lambda r: httpx.Response(200, json=payload), weather_api_key="wk"
        )
        result = asyncio.run(service.reply("weather?", service="weather", location="Pune"))
        assert result == {"reply": payload, "tool": "weather"}
        params = recorder.requests[0].url.params
        assert params["q"] == "Pune"
        assert params["appid"] == "wk"
        assert params["units"] == "metric"

    def test_weather_requires_location(self, settings_factory):
        service = ChatService(settings_factory(weather_api_key="wk"))
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(service.reply("x", service="weather"))
        assert exc_info.value.message == "location is required for weather service"

    def test_weather_requires_key(self, settings_factory):
        with pytest.raises(ConfigurationError) as exc_info:
            asyncio.run(ChatService(settings_factory()).reply("x", service="weather", location="Pune"))
        assert exc_info.value.message == "WEATHER_API_KEY not configured"

    def test_enws(self, settings_factory):
        service, recorder = make_service(
            settings_factory, lambda r: httpx.Response(200, json={"results": [1, 2]}), enws_api_key="ek"
        )
        result = asyncio.run(service.reply("x", service="enws", query="solar"))
        assert result == {"reply": {"results": [1, 2]}, "tool": "enws"}
        request = recorder.requests[0]
        assert request.url.params["q"] == "solar"
        assert request.headers["Authorization"] == "Bearer ek"

    def test_enws_requires_query(self, settings_factory):
        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(ChatService(settings_factory(enws_api_key="ek")).reply("x", service="enws"))
        assert exc_info.value.message == "query is required for enws service"

    def test_enws_requires_key(self, settings_factory):
        with pytest.raises(ConfigurationError) as exc_info:
            asyncio.run(ChatService(settings_factory()).reply("x", service="enws", query="q"))
        assert exc_info.value.message == "ENWS_API_KEY not configured"
