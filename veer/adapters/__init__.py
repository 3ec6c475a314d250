"""
Adapters for external services and the operating system.
"""
from veer.adapters.http_client import (
    HTTPClientAdapterFactory,
    HTTPResponse,
    HTTPError,
    HTTPStatusError,
    TimeoutException,
    RequestError,
)
from veer.adapters.shell import CommandResult, ShellRunner

__all__ = [
    # HTTP Client
    "HTTPClientAdapterFactory",
    "HTTPResponse",
    "HTTPError",
    "HTTPStatusError",
    "TimeoutException",
    "RequestError",
    # Shell
    "CommandResult",
    "ShellRunner",
]
