"""
Event settings model (single row)
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, Boolean, DateTime

from app.core.db import Base

DEFAULT_EVENT_NAME = "Our Special Day"
DEFAULT_HOME_PAGE_TEXT = "Welcome to our wedding! Please find your table below."

class EventSettings(Base):
    __tablename__ = "event_settings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_name = Column(Text, nullable=False, default=DEFAULT_EVENT_NAME)
    home_page_text = Column(Text, nullable=False, default=DEFAULT_HOME_PAGE_TEXT)
    search_enabled = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
