"""
Security headers middleware for the VEER HTTP services.

Adds the usual hardening headers to every response:
- X-Content-Type-Options: nosniff
- X-Frame-Options: SAMEORIGIN
- Referrer-Policy: no-referrer
- Cross-Origin-Opener-Policy: same-origin
- Cross-Origin-Resource-Policy: configurable; the system agent needs
  "cross-origin" so the web app (served elsewhere) can read its responses
- Content-Security-Policy: restrictive default
- Strict-Transport-Security: only when enabled and the request is HTTPS

Every value can be overridden via SECURITY_HEADER_* environment variables.
"""
import os
import logging
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware for adding security headers to all responses."""

    def __init__(self, app, resource_policy: str = "same-origin"):
        super().__init__(app)

        self.content_type_options = os.getenv("SECURITY_HEADER_X_CONTENT_TYPE_OPTIONS", "nosniff")
        self.frame_options = os.getenv("SECURITY_HEADER_X_FRAME_OPTIONS", "SAMEORIGIN")
        self.referrer_policy = os.getenv("SECURITY_HEADER_REFERRER_POLICY", "no-referrer")
        self.coop = os.getenv("SECURITY_HEADER_CROSS_ORIGIN_OPENER_POLICY", "same-origin")
        self.corp = os.getenv("SECURITY_HEADER_CROSS_ORIGIN_RESOURCE_POLICY", resource_policy)
        self.csp = os.getenv(
            "SECURITY_HEADER_CSP",
            "default-src 'self'; base-uri 'self'; frame-ancestors 'self'; object-src 'none'",
        )

        self.hsts_enabled = os.getenv("SECURITY_HSTS_ENABLED", "false").lower() == "true"
        self.hsts_max_age = int(os.getenv("SECURITY_HSTS_MAX_AGE", "31536000"))

        logger.debug(
            "Security headers middleware initialized",
            extra={
                "x_frame_options": self.frame_options,
                "cross_origin_resource_policy": self.corp,
                "hsts_enabled": self.hsts_enabled,
            }
        )

    def _build_hsts_header(self) -> Optional[str]:
        if not self.hsts_enabled:
            return None
        return f"max-age={self.hsts_max_age}; includeSubDomains"

    def _is_https(self, request: Request) -> bool:
        """Check if request is over HTTPS (directly or behind a proxy)."""
        if request.headers.get("X-Forwarded-Proto", "").lower() == "https":
            return True
        return request.url.scheme == "https"

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if isinstance(response, Response):
            response.headers["X-Content-Type-Options"] = self.content_type_options
            response.headers["X-Frame-Options"] = self.frame_options
            response.headers["Referrer-Policy"] = self.referrer_policy
            response.headers["Cross-Origin-Opener-Policy"] = self.coop
            response.headers["Cross-Origin-Resource-Policy"] = self.corp
            if self.csp:
                response.headers["Content-Security-Policy"] = self.csp
            if self._is_https(request):
                hsts_header = self._build_hsts_header()
                if hsts_header:
                    response.headers["Strict-Transport-Security"] = hsts_header

        return response
