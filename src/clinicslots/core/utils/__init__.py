"""
Utility helpers for Clinic-Slots.
"""

from .datetime_utils import Clock, clinic_now, combine, get_current_timestamp

__all__ = ["Clock", "clinic_now", "combine", "get_current_timestamp"]
