"""
Local system agent: HTTP endpoints that run OS actions and report telemetry.
"""
from veer.agent.platforms import Platform, detect_platform
from veer.agent.service import SystemAgent

__all__ = ["Platform", "detect_platform", "SystemAgent"]
