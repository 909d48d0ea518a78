"""Customer invoices and driver settlements built from stored tickets.

Ticket totals are read as stored (four decimal places). Rounding happens
only here, once per document figure: the invoice subtotal, the GST computed
from it, and the settlement pay total.
"""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from truckticket.core.config import get_settings
from truckticket.core.exceptions import FormatError, NotFoundError
from truckticket.models.customer import Customer
from truckticket.models.driver import Driver
from truckticket.models.ticket import Ticket, TicketStatus
from truckticket.schemas.billing import (
    DocumentMeta,
    InvoiceDocument,
    InvoiceLine,
    InvoiceResponse,
    SettlementDocument,
    SettlementLine,
    SettlementResponse,
)
from truckticket.schemas.driver import DriverIdentity
from truckticket.services.transactions import storage_errors
from truckticket.utils.money import ZERO, quantize_cents, to_decimal

logger = logging.getLogger(__name__)

_DATE_BOUND = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


def parse_date_bound(value: Optional[str], field: str) -> date:
    """
    Parse an inclusive ``YYYY-MM-DD`` period bound.

    Raises FormatError when the value is missing, has another shape, or
    names a day that does not exist (``2025-02-30``).
    """
    if value is None:
        raise FormatError(f"{field} is required", field=field)
    if isinstance(value, date):
        return value
    value = str(value).strip()
    if not _DATE_BOUND.match(value):
        raise FormatError(f"{field} must be in YYYY-MM-DD format", field=field, value=value)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise FormatError(f"{field} is not a valid date", field=field, value=value)


def parse_period_bounds(start: Optional[str], end: Optional[str]) -> Tuple[date, date]:
    return parse_date_bound(start, "start_date"), parse_date_bound(end, "end_date")


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    gst: Decimal
    total: Decimal


def invoice_totals(raw_subtotal: Decimal, gst_rate: Decimal) -> InvoiceTotals:
    """
    Round an exact subtotal and derive GST from it.

    The subtotal is rounded once to cents, GST is computed on that rounded
    subtotal and rounded once, and the total is their sum.

    Example:
        >>> invoice_totals(Decimal("350.50"), Decimal("0.05"))
        InvoiceTotals(subtotal=Decimal('350.50'), gst=Decimal('17.53'), total=Decimal('368.03'))
    """
    subtotal = quantize_cents(to_decimal(raw_subtotal))
    gst = quantize_cents(subtotal * to_decimal(gst_rate))
    return InvoiceTotals(subtotal=subtotal, gst=gst, total=subtotal + gst)


def summarize_invoice(line_totals: Iterable[Decimal], gst_rate: Decimal) -> InvoiceTotals:
    raw = ZERO
    for amount in line_totals:
        raw += to_decimal(amount)
    return invoice_totals(raw, gst_rate)


def sanitize_filename_part(value: str) -> str:
    return _FILENAME_UNSAFE.sub("_", value)


class BillingService:
    def __init__(self, db: AsyncSession, gst_rate: Optional[Decimal] = None) -> None:
        self.db = db
        self.gst_rate = to_decimal(gst_rate if gst_rate is not None else get_settings().invoice_gst_rate)

    async def build_invoice(
        self,
        customer_id: str,
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> InvoiceResponse:
        """Approved tickets for one customer within an inclusive date range."""
        start, end = parse_period_bounds(start_date, end_date)

        async with storage_errors("fetch customer"):
            customer = await self.db.get(Customer, customer_id)
        if not customer:
            raise NotFoundError("Customer not found", customer_id=customer_id)

        stmt = (
            select(Ticket, Driver.name, Driver.code)
            .outerjoin(Driver, Ticket.driver_id == Driver.id)
            .where(
                Ticket.customer == customer.name,
                Ticket.status == TicketStatus.APPROVED.value,
                Ticket.date >= start,
                Ticket.date <= end,
            )
            .order_by(Ticket.date.asc(), Ticket.created_at.asc())
        )

        lines = []
        raw_subtotal = ZERO
        async with storage_errors("build invoice"):
            result = await self.db.stream(stmt)
            async for ticket, driver_name, driver_code in result:
                raw_subtotal += to_decimal(ticket.total_bill)
                lines.append(
                    InvoiceLine(
                        ticket_id=ticket.id,
                        date=ticket.date,
                        ticket_number=ticket.ticket_number,
                        description=ticket.job_type,
                        truck_number=ticket.truck_number,
                        driver_name=driver_name,
                        driver_code=driver_code,
                        quantity=ticket.quantity,
                        bill_rate=ticket.bill_rate,
                        total_bill=ticket.total_bill,
                    )
                )

        totals = invoice_totals(raw_subtotal, self.gst_rate)
        logger.debug(f"Invoice for {customer.name} {start}..{end}: {len(lines)} tickets, total {totals.total}")
        return InvoiceResponse(
            customer_id=customer.id,
            customer=customer.name,
            start_date=start,
            end_date=end,
            tickets=lines,
            subtotal=totals.subtotal,
            gst_rate=self.gst_rate,
            gst=totals.gst,
            total=totals.total,
        )

    async def build_settlement(
        self,
        driver_id: str,
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> SettlementResponse:
        """Every ticket a driver submitted in range, whatever its status."""
        start, end = parse_period_bounds(start_date, end_date)

        async with storage_errors("fetch driver"):
            driver = await self.db.get(Driver, driver_id)
        if not driver:
            raise NotFoundError("Driver not found", driver_id=driver_id)

        stmt = (
            select(Ticket, Customer.name)
            .outerjoin(Customer, Ticket.customer == Customer.name)
            .where(
                Ticket.driver_id == driver.id,
                Ticket.date >= start,
                Ticket.date <= end,
            )
            .order_by(Ticket.date.asc(), Ticket.created_at.asc())
        )

        lines = []
        total_pay = ZERO
        async with storage_errors("build settlement"):
            result = await self.db.stream(stmt)
            async for ticket, customer_name in result:
                total_pay += to_decimal(ticket.total_pay)
                lines.append(
                    SettlementLine(
                        ticket_id=ticket.id,
                        date=ticket.date,
                        ticket_number=ticket.ticket_number,
                        customer=ticket.customer,
                        customer_name=customer_name,
                        job_type=ticket.job_type,
                        truck_number=ticket.truck_number,
                        quantity=ticket.quantity,
                        pay_rate=ticket.pay_rate,
                        total_pay=ticket.total_pay,
                        status=ticket.status,
                    )
                )

        return SettlementResponse(
            driver=DriverIdentity.model_validate(driver),
            start_date=start,
            end_date=end,
            tickets=lines,
            total_pay=quantize_cents(total_pay),
        )

    async def export_invoice(
        self,
        customer_id: str,
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> InvoiceDocument:
        """Invoice plus the metadata a PDF renderer needs. Empty invoices are refused."""
        invoice = await self.build_invoice(customer_id, start_date, end_date)
        if not invoice.tickets:
            raise NotFoundError("No approved tickets found for the selected date range")

        filename = (
            f"Invoice-{sanitize_filename_part(invoice.customer)}-"
            f"{invoice.start_date.isoformat()}-{invoice.end_date.isoformat()}.pdf"
        )
        meta = DocumentMeta(
            document_number=self._build_document_number("INV"),
            issued_on=datetime.utcnow().date(),
            filename=filename,
        )
        logger.info(f"Exported invoice {meta.document_number} for {invoice.customer} ({len(invoice.tickets)} tickets)")
        return InvoiceDocument(meta=meta, invoice=invoice)

    async def export_settlement(
        self,
        driver_id: str,
        start_date: Optional[str],
        end_date: Optional[str],
    ) -> SettlementDocument:
        settlement = await self.build_settlement(driver_id, start_date, end_date)
        filename = (
            f"Settlement-{settlement.driver.code}-"
            f"{settlement.start_date.isoformat()}-{settlement.end_date.isoformat()}.pdf"
        )
        meta = DocumentMeta(
            document_number=self._build_document_number("STL"),
            issued_on=datetime.utcnow().date(),
            filename=filename,
        )
        logger.info(f"Exported settlement {meta.document_number} for driver {settlement.driver.code}")
        return SettlementDocument(meta=meta, settlement=settlement)

    def _build_document_number(self, prefix: str) -> str:
        timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
        suffix = uuid.uuid4().hex[:6].upper()
        return f"{prefix}-{timestamp}-{suffix}"
