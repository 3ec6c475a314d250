"""
Application factory for the local system agent.

SECURITY: the agent executes commands on the machine it runs on. Bind it to
localhost, set SYSTEM_AGENT_TOKEN, and never expose it to the internet.
"""
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional, Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from veer.agent import telemetry
from veer.agent.history import HistoryBuffer, HistorySampler
from veer.agent.routes import router, guarded
from veer.agent.service import SystemAgent
from veer.config import Settings, get_settings
from veer.exceptions.handlers import setup_exception_handlers
from veer.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)


def _default_sampler() -> Callable[[], Tuple[float, float]]:
    tracker = telemetry.CpuUsageTracker()
    return lambda: (tracker.sample(), telemetry.memory_usage_percent())


def create_agent_app(
    settings: Optional[Settings] = None,
    agent: Optional[SystemAgent] = None,
    sample=None,
    run_sampler: bool = True,
) -> FastAPI:
    """
    Build the system agent FastAPI app.

    Args:
        settings: Settings to use (cached settings when omitted)
        agent: SystemAgent to dispatch to (real shell + psutil when omitted)
        sample: Callable returning (cpu%, memory%) for the history task
        run_sampler: Start the periodic history task on startup
    """
    settings = settings or get_settings()
    agent = agent or SystemAgent(history=HistoryBuffer(settings.history_max_points))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sampler = None
        if run_sampler:
            sampler = HistorySampler(
                agent.history,
                sample or _default_sampler(),
                interval=settings.history_interval_seconds,
            )
            sampler.start()
        logger.info(f"VEER system agent platform: {agent.platform.value}")
        if settings.system_agent_token:
            logger.info("SYSTEM_AGENT_TOKEN is set (agent requires token)")
        else:
            logger.warning("No SYSTEM_AGENT_TOKEN set - agent is open to local requests")
        try:
            yield
        finally:
            if sampler is not None:
                await sampler.stop()

    app = FastAPI(title="VEER System Agent", lifespan=lifespan)
    app.state.settings = settings
    app.state.agent = agent

    # Security headers sit inside CORS so preflight answers come from CORS first
    app.add_middleware(SecurityHeadersMiddleware, resource_policy="cross-origin")
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "x-veer-token", "Authorization"],
    )

    setup_exception_handlers(app)
    app.include_router(router)
    app.include_router(guarded)
    return app
