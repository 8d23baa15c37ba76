"""
Event settings schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

class EventSettingsResponse(BaseModel):
    event_name: str
    home_page_text: str
    search_enabled: bool
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class EventSettingsUpdate(BaseModel):
    event_name: Optional[str] = None
    home_page_text: Optional[str] = None
    search_enabled: Optional[bool] = None
