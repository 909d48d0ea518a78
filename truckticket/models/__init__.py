from truckticket.models.base import Base
from truckticket.models.customer import Customer
from truckticket.models.driver import Driver
from truckticket.models.ticket import Ticket, TicketStatus
from truckticket.models.user import User, UserRole

__all__ = [
    "Base",
    "Customer",
    "Driver",
    "Ticket",
    "TicketStatus",
    "User",
    "UserRole",
]
