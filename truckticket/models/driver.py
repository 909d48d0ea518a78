from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.orm import relationship

from truckticket.models.base import Base


class Driver(Base):
    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)

    code = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    default_pay_rate = Column(Numeric(10, 2), nullable=False, default=0)
    pin_hash = Column(String(255), nullable=False)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="driver")
    tickets = relationship(
        "Ticket",
        back_populates="driver",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
