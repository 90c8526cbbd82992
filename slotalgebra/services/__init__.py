"""
Service layer helpers that orchestrate rules and set operations.
"""

from .availability import AvailabilityService

__all__ = ["AvailabilityService"]
