"""
Guest-related Pydantic schemas
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

class GuestCreate(BaseModel):
    """Schema for creating a guest"""
    name: str
    party_size: Optional[int] = 1
    table_id: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None

class GuestUpdate(BaseModel):
    """Schema for updating a guest; only fields that are sent are applied"""
    name: Optional[str] = None
    party_size: Optional[int] = None
    table_id: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None

class GuestResponse(BaseModel):
    """Guest response schema"""
    id: str
    name: str
    party_size: int
    table_id: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AssignRequest(BaseModel):
    """Seat a guest at a table; a null table_id unassigns"""
    table_id: Optional[str] = None
    party_size: Optional[int] = None

class LookupRequest(BaseModel):
    """Guest portal lookup request"""
    name: str = Field(..., min_length=1, max_length=255)

class AddressUpdate(BaseModel):
    """Guest portal self-service address update"""
    address: str = Field(..., min_length=1)

class TableMate(BaseModel):
    name: str
    party_size: int

class SeatingInfo(BaseModel):
    """Seating information for a guest"""
    guest_id: str
    guest_name: str
    party_size: int
    table_name: Optional[str] = None
    has_address: bool
    table_mates: List[TableMate]
