"""User model definitions."""

from sqlalchemy import Column, Integer, String
from dentops.database import Base

PROVIDER_ROLE = "dentist"


class User(Base):
    """Represents a clinic user; providers carry the dentist role."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    full_name = Column(String)
    role = Column(String)  # patient/dentist/manager
