"""Invoice and settlement generation for the admin UI."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from truckticket.api import deps
from truckticket.schemas.billing import (
    InvoiceDocument,
    InvoiceResponse,
    SettlementDocument,
    SettlementResponse,
)
from truckticket.services.billing import BillingService

logger = logging.getLogger(__name__)

invoices_router = APIRouter()
settlements_router = APIRouter()

NO_CACHE = "no-cache, no-store, must-revalidate"


def _no_cache(response: Response) -> None:
    response.headers["Cache-Control"] = NO_CACHE
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"


@invoices_router.get("/generate", response_model=InvoiceResponse)
async def generate_invoice(
    customer_id: str = Query(...),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    service: BillingService = Depends(deps.get_billing_service),
) -> InvoiceResponse:
    """Preview an invoice. A range without approved tickets yields zero totals."""
    return await service.build_invoice(customer_id, start_date, end_date)


@invoices_router.get("/export/{customer_id}", response_model=InvoiceDocument)
async def export_invoice(
    customer_id: str,
    response: Response,
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    service: BillingService = Depends(deps.get_billing_service),
) -> InvoiceDocument:
    document = await service.export_invoice(customer_id, start_date, end_date)
    _no_cache(response)
    return document


@settlements_router.get("/generate", response_model=SettlementResponse)
async def generate_settlement(
    driver_id: str = Query(...),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    service: BillingService = Depends(deps.get_billing_service),
) -> SettlementResponse:
    return await service.build_settlement(driver_id, start_date, end_date)


@settlements_router.get("/export/{driver_id}", response_model=SettlementDocument)
async def export_settlement(
    driver_id: str,
    response: Response,
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    service: BillingService = Depends(deps.get_billing_service),
) -> SettlementDocument:
    document = await service.export_settlement(driver_id, start_date, end_date)
    _no_cache(response)
    return document
