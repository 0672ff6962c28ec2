"""Appointment model definitions."""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, String
from dentops.database import Base

BLOCKING_STATUSES = ("PENDING", "CONFIRMED")


class Appointment(Base):
    """Represents a requested or scheduled appointment."""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    patient_id = Column(Integer, ForeignKey("users.id"))
    provider_id = Column(Integer, ForeignKey("users.id"), index=True)
    appointment_type_id = Column(Integer, ForeignKey("appointment_types.id"))
    start_time = Column(DateTime)
    end_time = Column(DateTime)
    status = Column(String, default="PENDING")  # PENDING/CONFIRMED/CANCELLED/COMPLETED/NO_SHOW
