"""
Guest model
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core.db import Base

class Guest(Base):
    __tablename__ = "guests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    phone_number = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    party_size = Column(Integer, nullable=False, default=1)  # people in this guest's party
    sort_order = Column(Integer, nullable=False, default=0, index=True)  # insertion order
    version = Column(Integer, nullable=False, default=1)
    table_id = Column(String(36), ForeignKey("tables.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    table = relationship("Table", back_populates="guests")

    # A seat change reads party_size and table_id before writing; a concurrent
    # change to either makes the later commit fail with StaleDataError.
    __mapper_args__ = {"version_id_col": version}
