"""Schedule (caregiver visit) ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, Float, Index, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base


class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (Index("ix_schedules_shift_time", "shift_time"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    client_name = Column(String(length=255), nullable=False)
    shift_time = Column(DateTime(timezone=True), nullable=False)
    location = Column(Text, nullable=False)
    status = Column(String(length=20), nullable=False, server_default="upcoming")
    start_time = Column(DateTime(timezone=True), nullable=True)
    start_latitude = Column(Float, nullable=True)
    start_longitude = Column(Float, nullable=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    end_latitude = Column(Float, nullable=True)
    end_longitude = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
