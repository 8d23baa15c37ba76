"""
Seating chart annotations: free text labels and reference shapes
"""

import uuid
from sqlalchemy import Column, String, Text, Float, Integer

from app.core.db import Base

class LayoutLabel(Base):
    __tablename__ = "layout_labels"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    text = Column(Text, nullable=False)
    x = Column(Float, nullable=False, default=0)
    y = Column(Float, nullable=False, default=0)
    font_size = Column(Integer, nullable=False, default=16)
    rotation = Column(Float, nullable=False, default=0)

class LayoutShape(Base):
    __tablename__ = "layout_shapes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = Column(String(30), nullable=False)  # dance-floor, stage, bar, rectangle, ...
    x = Column(Float, nullable=False, default=0)
    y = Column(Float, nullable=False, default=0)
    width = Column(Float, nullable=False, default=100)
    height = Column(Float, nullable=False, default=100)
    rotation = Column(Float, nullable=False, default=0)
    color = Column(String(20), nullable=True)
    label = Column(String(100), nullable=True)
