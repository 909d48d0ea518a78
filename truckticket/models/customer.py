from sqlalchemy import Column, DateTime, Numeric, String, func

from truckticket.models.base import Base


class Customer(Base):
    id = Column(String, primary_key=True)

    # Tickets join on this exact string, not on id
    name = Column(String(255), nullable=False, unique=True, index=True)
    default_bill_rate = Column(Numeric(10, 2), nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
