"""Availability model definitions."""

from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String
from dentops.database import Base


class Availability(Base):
    """Represents a provider's recurring or one-off working window."""
    __tablename__ = "availability"

    id = Column(Integer, primary_key=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    weekday = Column(Integer)  # 0 = Sunday
    start_time_of_day = Column(String(5), nullable=False)  # HH:MM
    end_time_of_day = Column(String(5), nullable=False)
    is_recurring = Column(Boolean, default=True)
    is_active = Column(Boolean, default=True)
    start_date = Column(Date)
    end_date = Column(Date)
    created_at = Column(DateTime, default=datetime.now)
