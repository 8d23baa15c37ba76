"""
Table-related Pydantic schemas
"""

from typing import List, Optional, Union
from pydantic import BaseModel

from .guest import GuestResponse

class TableCreate(BaseModel):
    """Schema for creating a table; capacity defaults from the shape"""
    name: str
    shape: str = "round"
    capacity: Optional[Union[int, str]] = None
    position_x: float = 0
    position_y: float = 0
    rotation: float = 0

class TableUpdate(BaseModel):
    """Schema for updating a table; only fields that are sent are applied"""
    name: Optional[str] = None
    shape: Optional[str] = None
    capacity: Optional[Union[int, str]] = None
    position_x: Optional[float] = None
    position_y: Optional[float] = None
    rotation: Optional[float] = None

class TableRename(BaseModel):
    name: str

class TableResponse(BaseModel):
    """Table response schema"""
    id: str
    name: str
    shape: str
    capacity: int
    position_x: float
    position_y: float
    rotation: float

    class Config:
        from_attributes = True

class TableWithGuests(TableResponse):
    """Table with its roster and load"""
    guests: List[GuestResponse]
    seats_used: int
    seats_available: int
    is_full: bool

class PublicTable(TableResponse):
    """Table as shown on the guest portal (no guest details)"""
    seats_used: int

class AutoArrangeRequest(BaseModel):
    canvas_width: Optional[int] = None
    canvas_height: Optional[int] = None
