"""
Token guard for the system agent.
"""
import hmac
import logging

from fastapi import Request

from veer.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_HEADER = "x-veer-token"


async def verify_agent_token(request: Request) -> None:
    """
    Require the ``x-veer-token`` header when a token is configured.

    With no SYSTEM_AGENT_TOKEN set the agent is open to local requests.

    Raises:
        AuthenticationError (401) if the header is missing or wrong
    """
    expected = request.app.state.settings.system_agent_token
    if not expected:
        return
    provided = request.headers.get(TOKEN_HEADER, "")
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning(
            "Rejected agent request with invalid token",
            extra={"path": request.url.path, "client": request.client.host if request.client else None},
        )
        raise AuthenticationError("Invalid token")
