"""
Table model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.orm import relationship

from app.core.db import Base

# Default capacity suggested for each shape when none is given
SHAPE_DEFAULT_CAPACITY = {
    "round": 8,
    "rectangular": 10,
    "square": 4,
    "oval": 10,
    "u-shape": 16,
    "cocktail": 4,
}

TABLE_SHAPES = tuple(SHAPE_DEFAULT_CAPACITY)

class Table(Base):
    __tablename__ = "tables"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(50), nullable=False)
    shape = Column(String(20), nullable=False, default="round")
    capacity = Column(Integer, nullable=False, default=8)
    position_x = Column(Float, nullable=False, default=0)
    position_y = Column(Float, nullable=False, default=0)
    rotation = Column(Float, nullable=False, default=0)  # degrees, 0-360
    sort_order = Column(Integer, nullable=False, default=0, index=True)  # insertion order
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    guests = relationship("Guest", back_populates="table", order_by="Guest.sort_order")

    # Every UPDATE/DELETE of a table row checks and bumps the version,
    # so two writers racing on the same table cannot both commit.
    __mapper_args__ = {"version_id_col": version}
