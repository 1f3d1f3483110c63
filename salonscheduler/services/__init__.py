"""
Service layer helpers that orchestrate data sources and domain logic.
"""

from .scheduling_service import ScheduleSourceProtocol, SchedulingService

__all__ = ["ScheduleSourceProtocol", "SchedulingService"]
