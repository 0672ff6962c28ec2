"""Appointment type model definitions."""

from sqlalchemy import Boolean, Column, Integer, String
from dentops.database import Base


class AppointmentType(Base):
    """A bookable service and how long it takes."""
    __tablename__ = "appointment_types"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    description = Column(String)
    is_active = Column(Boolean, default=True)
