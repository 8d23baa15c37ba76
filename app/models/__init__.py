"""
Database models package
"""

from .table import Table
from .guest import Guest
from .event_settings import EventSettings
from .layout import LayoutLabel, LayoutShape

__all__ = ["Table", "Guest", "EventSettings", "LayoutLabel", "LayoutShape"]
