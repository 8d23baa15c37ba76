"""
Seating chart annotation schemas
"""

from typing import List, Optional
from pydantic import BaseModel

class LabelIn(BaseModel):
    text: str
    x: float = 0
    y: float = 0
    font_size: int = 16
    rotation: float = 0

class LabelResponse(LabelIn):
    id: str

    class Config:
        from_attributes = True

class LabelsReplace(BaseModel):
    labels: List[LabelIn]

class ShapeIn(BaseModel):
    type: str
    x: float = 0
    y: float = 0
    width: float = 100
    height: float = 100
    rotation: float = 0
    color: Optional[str] = None
    label: Optional[str] = None

class ShapeResponse(ShapeIn):
    id: str

    class Config:
        from_attributes = True

class ShapesReplace(BaseModel):
    shapes: List[ShapeIn]
