import enum

from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.orm import relationship

from truckticket.models.base import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    DRIVER = "driver"


class User(Base):
    """Login account. Authentication itself happens outside this service."""

    id = Column(String, primary_key=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    driver = relationship("Driver", back_populates="user", uselist=False, cascade="all, delete-orphan")
