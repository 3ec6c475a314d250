"""
Agent command - Run the local system agent.
"""
import logging

from veer.commands.server import ServerCommand

logger = logging.getLogger(__name__)


class AgentCommand(ServerCommand):
    """Run the local system agent (binds to localhost by default)."""

    default_host_setting = "agent_host"
    default_port_setting = "agent_port"

    def create_app(self):
        from veer.agent.app import create_agent_app

        if self.args.host not in ("127.0.0.1", "localhost", "::1"):
            logger.warning(f"System agent bound to {self.args.host}; it can run commands on this machine")
        return create_agent_app()
