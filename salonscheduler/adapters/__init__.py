"""
Adapters layer - Data sources for profiles, bookings and blocks.
"""

from .http_schedule_source import HttpScheduleSource
from .json_schedule_source import JsonScheduleSource

__all__ = ["HttpScheduleSource", "JsonScheduleSource"]
