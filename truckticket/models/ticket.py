"""Work ticket submitted by a driver."""
import enum

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, func
from sqlalchemy.orm import relationship

from truckticket.models.base import Base


class TicketStatus(str, enum.Enum):
    """Review state of a ticket. Admins may move between any of these."""
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Ticket(Base):
    id = Column(String, primary_key=True)
    driver_id = Column(String, ForeignKey("driver.id", ondelete="CASCADE"), nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    truck_number = Column(String(50), nullable=True)
    # Customer name, or several names joined with ", "
    customer = Column(String(255), nullable=False, index=True)
    job_type = Column(String(255), nullable=True)
    equipment_type = Column(String(255), nullable=True, index=True)
    ticket_number = Column(String(100), nullable=False, index=True)
    photo_path = Column(String(500), nullable=True)

    quantity = Column(Numeric(10, 2), nullable=False, default=0)
    bill_rate = Column(Numeric(10, 2), nullable=False, default=0)
    pay_rate = Column(Numeric(10, 2), nullable=False, default=0)
    # quantity * rate, kept unrounded
    total_bill = Column(Numeric(14, 4), nullable=False, default=0)
    total_pay = Column(Numeric(14, 4), nullable=False, default=0)

    status = Column(String(20), nullable=False, default=TicketStatus.PENDING.value, index=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    driver = relationship("Driver", back_populates="tickets")
