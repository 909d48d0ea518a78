"""Ticket pricing, submission and admin corrections."""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from truckticket.core.exceptions import NotFoundError, ValidationError
from truckticket.models.driver import Driver
from truckticket.models.ticket import Ticket, TicketStatus
from truckticket.schemas.ticket import TicketCreate, TicketUpdate
from truckticket.services.rates import RateService, join_customer_names
from truckticket.services.transactions import storage_errors, unit_of_work
from truckticket.utils.money import MAX_AMOUNT, Number, quantize_cents, to_decimal

logger = logging.getLogger(__name__)

VALID_STATUSES = tuple(status.value for status in TicketStatus)
AMOUNT_FIELDS = ("quantity", "bill_rate", "pay_rate")
UPDATABLE_FIELDS = AMOUNT_FIELDS + ("status",)


@dataclass(frozen=True)
class TicketTotals:
    total_bill: Decimal
    total_pay: Decimal


def normalize_amount(value: Number, field: str) -> Decimal:
    """Quantity or rate as a non-negative Decimal with two decimal places."""
    try:
        amount = to_decimal(value)
    except ValueError:
        raise ValidationError(f"{field} must be a number", field=field)
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number", field=field)
    if amount < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} must not exceed {MAX_AMOUNT}", field=field)
    return quantize_cents(amount)


def validate_status(status: Any) -> str:
    if status not in VALID_STATUSES:
        raise ValidationError(
            "Valid status is required (Pending, Approved, or Rejected)",
            received=status,
        )
    return status


def price_new_ticket(quantity: Number, bill_rate: Number, pay_rate: Number) -> TicketTotals:
    """
    Bill and pay totals for a ticket.

    The products are exact; nothing is rounded here. Rounding to cents only
    happens on aggregated documents.
    """
    quantity = to_decimal(quantity)
    bill_rate = to_decimal(bill_rate)
    pay_rate = to_decimal(pay_rate)
    if quantity < 0 or bill_rate < 0 or pay_rate < 0:
        raise ValidationError("Quantity and rates must not be negative")
    return TicketTotals(total_bill=quantity * bill_rate, total_pay=quantity * pay_rate)


def _patch_fields(patch: Union[TicketUpdate, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(patch, TicketUpdate):
        data = patch.model_dump(exclude_none=True)
    else:
        data = {key: value for key, value in dict(patch).items() if value is not None}
    return {key: value for key, value in data.items() if key in UPDATABLE_FIELDS}


class TicketService:
    def __init__(self, db: AsyncSession, rate_service: Optional[RateService] = None) -> None:
        self.db = db
        self.rates = rate_service or RateService(db)

    async def get_ticket(self, ticket_id: str) -> Ticket:
        async with storage_errors("fetch ticket"):
            ticket = await self.db.get(Ticket, ticket_id)
        if not ticket:
            raise NotFoundError("Ticket not found", ticket_id=ticket_id)
        return ticket

    async def get_driver_ticket(self, driver_id: str, ticket_id: str) -> Ticket:
        """A driver can only read tickets they submitted."""
        async with storage_errors("fetch ticket"):
            result = await self.db.execute(
                select(Ticket).where(Ticket.id == ticket_id, Ticket.driver_id == driver_id)
            )
        ticket = result.scalar_one_or_none()
        if not ticket:
            raise NotFoundError("Ticket not found or access denied", ticket_id=ticket_id)
        return ticket

    async def list_driver_tickets(self, driver_id: str) -> List[Ticket]:
        await self._get_driver(driver_id)
        async with storage_errors("list driver tickets"):
            result = await self.db.execute(
                select(Ticket)
                .where(Ticket.driver_id == driver_id)
                .order_by(Ticket.date.desc(), Ticket.created_at.desc())
            )
        return list(result.scalars().all())

    async def create_ticket(self, driver_id: str, payload: TicketCreate) -> Ticket:
        """
        Price and store a driver's ticket.

        Rates come from the current customer and driver defaults and are
        frozen on the ticket; later default changes do not reprice it.
        """
        driver = await self._get_driver(driver_id)
        names, rates = await self.rates.rates_for_ticket(payload.customer, driver)
        quantity = normalize_amount(payload.quantity, "quantity")
        totals = price_new_ticket(quantity, rates.bill_rate, rates.pay_rate)

        ticket = Ticket(
            id=str(uuid.uuid4()),
            driver_id=driver.id,
            date=payload.date,
            truck_number=payload.truck_number,
            customer=join_customer_names(names),
            job_type=payload.job_type,
            equipment_type=payload.equipment_type,
            ticket_number=payload.ticket_number,
            quantity=quantity,
            photo_path=payload.photo_path,
            bill_rate=rates.bill_rate,
            pay_rate=rates.pay_rate,
            total_bill=totals.total_bill,
            total_pay=totals.total_pay,
            status=TicketStatus.PENDING.value,
        )
        async with unit_of_work(self.db, "create ticket"):
            self.db.add(ticket)
        await self.db.refresh(ticket)

        logger.info(
            f"Driver {driver.code} submitted ticket {ticket.ticket_number} "
            f"(bill_rate={rates.bill_rate}, pay_rate={rates.pay_rate})"
        )
        return ticket

    async def apply_partial_update(
        self,
        ticket_id: str,
        patch: Union[TicketUpdate, Mapping[str, Any]],
    ) -> Ticket:
        """
        Apply an admin correction to quantity, rates and/or status.

        Fields missing from the patch keep their stored values, and both
        totals are re-derived from the resulting quantity and rates so they
        always match what is stored. An empty patch is rejected.
        """
        changes = _patch_fields(patch)
        if not changes:
            raise ValidationError("No fields to update")
        if "status" in changes:
            changes["status"] = validate_status(changes["status"])
        for field in AMOUNT_FIELDS:
            if field in changes:
                changes[field] = normalize_amount(changes[field], field)

        async with unit_of_work(self.db, "update ticket"):
            result = await self.db.execute(
                select(Ticket)
                .where(Ticket.id == ticket_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            ticket = result.scalar_one_or_none()
            if ticket is None:
                raise NotFoundError("Ticket not found", ticket_id=ticket_id)

            quantity = changes.get("quantity", ticket.quantity)
            bill_rate = changes.get("bill_rate", ticket.bill_rate)
            pay_rate = changes.get("pay_rate", ticket.pay_rate)
            totals = price_new_ticket(quantity, bill_rate, pay_rate)

            for field, value in changes.items():
                setattr(ticket, field, value)
            ticket.total_bill = totals.total_bill
            ticket.total_pay = totals.total_pay

        await self.db.refresh(ticket)
        logger.info(f"Ticket {ticket_id} updated: {sorted(changes)}")
        return ticket

    async def update_status(self, ticket_id: str, status: Optional[str]) -> Ticket:
        return await self.apply_partial_update(ticket_id, {"status": validate_status(status)})

    async def _get_driver(self, driver_id: str) -> Driver:
        async with storage_errors("fetch driver"):
            driver = await self.db.get(Driver, driver_id)
        if not driver:
            raise NotFoundError("Driver not found", driver_id=driver_id)
        return driver
