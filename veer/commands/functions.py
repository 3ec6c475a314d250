"""
Functions command - Run the chat / daily data / table REST service.
"""
from veer.commands.server import ServerCommand


class FunctionsCommand(ServerCommand):
    """Run the functions service (veer-chat, update-daily-data, /rest/v1 tables)."""

    default_host_setting = "functions_host"
    default_port_setting = "functions_port"

    def create_app(self):
        from veer.functions.app import create_functions_app

        return create_functions_app()
