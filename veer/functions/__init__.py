"""
Functions service: AI chat, daily data refresh and the table REST surface.
"""
from veer.functions.chat import ChatService, build_messages
from veer.functions.daily_data import DailyDataService

__all__ = ["ChatService", "DailyDataService", "build_messages"]
