"""Endpoints used by the driver app.

Authentication happens in front of this service, which passes the
signed-in driver's id in the path.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from truckticket.api import deps
from truckticket.schemas.customer import CustomerOption
from truckticket.schemas.dashboard import DriverDashboard, PayHistoryResponse
from truckticket.schemas.ticket import DriverTicketResponse, TicketCreate, TicketCreateResponse
from truckticket.services.customers import CustomerService
from truckticket.services.dashboard import DashboardService
from truckticket.services.tickets import TicketService

router = APIRouter()


@router.get("/customers", response_model=List[CustomerOption])
async def list_customer_options(
    service: CustomerService = Depends(deps.get_customer_service),
) -> List[CustomerOption]:
    customers = await service.list_customer_options()
    return [CustomerOption.model_validate(customer) for customer in customers]


@router.get("/{driver_id}/dashboard", response_model=DriverDashboard)
async def get_dashboard(
    driver_id: str,
    service: DashboardService = Depends(deps.get_dashboard_service),
) -> DriverDashboard:
    return await service.driver_dashboard(driver_id)


@router.get("/{driver_id}/tickets", response_model=List[DriverTicketResponse])
async def list_my_tickets(
    driver_id: str,
    service: TicketService = Depends(deps.get_ticket_service),
) -> List[DriverTicketResponse]:
    tickets = await service.list_driver_tickets(driver_id)
    return [DriverTicketResponse.model_validate(ticket) for ticket in tickets]


@router.post("/{driver_id}/tickets", response_model=TicketCreateResponse, status_code=status.HTTP_201_CREATED)
async def submit_ticket(
    driver_id: str,
    payload: TicketCreate,
    service: TicketService = Depends(deps.get_ticket_service),
) -> TicketCreateResponse:
    """Submit a ticket. Rates come from current defaults and status starts Pending."""
    ticket = await service.create_ticket(driver_id, payload)
    return TicketCreateResponse(id=ticket.id, ticket_number=ticket.ticket_number, status=ticket.status)


@router.get("/{driver_id}/tickets/{ticket_id}", response_model=DriverTicketResponse)
async def get_my_ticket(
    driver_id: str,
    ticket_id: str,
    service: TicketService = Depends(deps.get_ticket_service),
) -> DriverTicketResponse:
    ticket = await service.get_driver_ticket(driver_id, ticket_id)
    return DriverTicketResponse.model_validate(ticket)


@router.get("/{driver_id}/pay", response_model=PayHistoryResponse)
async def get_pay_history(
    driver_id: str,
    month: Optional[str] = Query(None, description="YYYY-MM or 'November 2025'"),
    service: DashboardService = Depends(deps.get_dashboard_service),
) -> PayHistoryResponse:
    return await service.pay_history(driver_id, month)


@router.get("/{driver_id}/pay/{month}", response_model=PayHistoryResponse)
async def get_pay_history_for_month(
    driver_id: str,
    month: str,
    service: DashboardService = Depends(deps.get_dashboard_service),
) -> PayHistoryResponse:
    return await service.pay_history(driver_id, month)
