"""Admin ticket board: listing, detail and corrections."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from truckticket.api import deps
from truckticket.schemas.ticket import TicketListItem, TicketResponse, TicketStatusUpdate, TicketUpdate
from truckticket.services.ticket_query import TicketFilter, TicketQueryService
from truckticket.services.tickets import TicketService

router = APIRouter()


@router.get("", response_model=List[TicketListItem])
async def list_tickets(
    month: Optional[str] = Query(None, description="YYYY-MM or 'November 2025'"),
    customer: Optional[str] = Query(None),
    driver: Optional[str] = Query(None, description="Driver name"),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Ticket number contains"),
    service: TicketQueryService = Depends(deps.get_ticket_query_service),
) -> List[TicketListItem]:
    criteria = TicketFilter(period=month, customer=customer, driver=driver, status=status, search=search)
    return await service.list_tickets(criteria)


@router.get("/{ticket_id}", response_model=TicketListItem)
async def get_ticket(
    ticket_id: str,
    service: TicketQueryService = Depends(deps.get_ticket_query_service),
) -> TicketListItem:
    return await service.get_ticket_detail(ticket_id)


@router.put("/{ticket_id}", response_model=TicketResponse)
async def update_ticket(
    ticket_id: str,
    payload: TicketUpdate,
    service: TicketService = Depends(deps.get_ticket_service),
) -> TicketResponse:
    """
    Correct quantity, rates and/or status.

    Omitted fields keep their stored values; both totals are recomputed.
    """
    ticket = await service.apply_partial_update(ticket_id, payload)
    return TicketResponse.model_validate(ticket)


@router.put("/{ticket_id}/status", response_model=TicketResponse)
async def update_ticket_status(
    ticket_id: str,
    payload: TicketStatusUpdate,
    service: TicketService = Depends(deps.get_ticket_service),
) -> TicketResponse:
    ticket = await service.update_status(ticket_id, payload.status)
    return TicketResponse.model_validate(ticket)
