"""
Application factory for the functions service (chat, daily data, table REST).
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from veer.config import Settings, get_settings
from veer.exceptions.handlers import setup_exception_handlers
from veer.functions.chat import ChatService
from veer.functions.daily_data import DailyDataService
from veer.functions.providers import ProviderClient
from veer.functions.routes import functions_router, rest_router
from veer.security_headers import SecurityHeadersMiddleware
from veer.storage import TableStore, open_store

logger = logging.getLogger(__name__)

CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_functions_app(
    settings: Optional[Settings] = None,
    store: Optional[TableStore] = None,
    client_kwargs: Optional[Dict[str, Any]] = None,
    daily: Optional[DailyDataService] = None,
) -> FastAPI:
    """
    Build the functions FastAPI app.

    Args:
        settings: Settings to use (cached settings when omitted)
        store: Table store (opened from settings.database_path when omitted)
        client_kwargs: Extra httpx client arguments for upstream calls (tests pass a transport)
        daily: Daily data service override
    """
    settings = settings or get_settings()
    store = store or open_store(settings.database_path)
    provider_client = ProviderClient(timeout=settings.upstream_timeout_seconds, client_kwargs=client_kwargs)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configured = [
            name for name, value in (
                ("openai", settings.openai_api_key),
                ("lovable", settings.lovable_api_key),
                ("weather", settings.weather_api_key),
                ("enws", settings.enws_api_key),
                ("news", settings.news_api_key),
            ) if value
        ]
        logger.info(f"Functions service using {store.db.db_path}; providers: {', '.join(configured) or 'none'}")
        yield

    app = FastAPI(title="VEER Functions", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.chat = ChatService(settings, client=provider_client)
    app.state.daily = daily or DailyDataService(
        store.daily_data,
        news_api_key=settings.news_api_key,
        timeout=settings.upstream_timeout_seconds,
        client_kwargs=client_kwargs,
    )

    app.add_middleware(SecurityHeadersMiddleware, resource_policy="cross-origin")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_HEADERS,
    )

    setup_exception_handlers(app)
    app.include_router(functions_router)
    app.include_router(rest_router)
    return app
