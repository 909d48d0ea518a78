from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from truckticket.core.db import get_db
from truckticket.services.billing import BillingService
from truckticket.services.customers import CustomerService
from truckticket.services.dashboard import DashboardService
from truckticket.services.drivers import DriverService
from truckticket.services.ticket_query import TicketQueryService
from truckticket.services.tickets import TicketService


async def get_ticket_service(db: AsyncSession = Depends(get_db)) -> TicketService:
    return TicketService(db)


async def get_ticket_query_service(db: AsyncSession = Depends(get_db)) -> TicketQueryService:
    return TicketQueryService(db)


async def get_billing_service(db: AsyncSession = Depends(get_db)) -> BillingService:
    return BillingService(db)


async def get_customer_service(db: AsyncSession = Depends(get_db)) -> CustomerService:
    return CustomerService(db)


async def get_driver_service(db: AsyncSession = Depends(get_db)) -> DriverService:
    return DriverService(db)


async def get_dashboard_service(db: AsyncSession = Depends(get_db)) -> DashboardService:
    return DashboardService(db)
