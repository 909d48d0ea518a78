"""Bill and pay rate resolution for newly submitted tickets."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from truckticket.core.exceptions import ValidationError
from truckticket.models.customer import Customer
from truckticket.models.driver import Driver
from truckticket.services.transactions import storage_errors
from truckticket.utils.money import ZERO, quantize_cents, to_decimal

CUSTOMER_SEPARATOR = ","


@dataclass(frozen=True)
class ResolvedRates:
    bill_rate: Decimal
    pay_rate: Decimal


def parse_customer_names(raw: Optional[str]) -> List[str]:
    """Split a ticket's customer field into names.

    Segments are trimmed, blanks dropped and repeats collapsed, keeping the
    order in which names first appear.
    """
    names: List[str] = []
    for segment in (raw or "").split(CUSTOMER_SEPARATOR):
        name = segment.strip()
        if name and name not in names:
            names.append(name)
    if not names:
        raise ValidationError("At least one customer name is required")
    return names


def join_customer_names(names: Iterable[str]) -> str:
    return f"{CUSTOMER_SEPARATOR} ".join(names)


def resolve_rates(
    customer_names: List[str],
    known_bill_rates: Mapping[str, Decimal],
    driver_default_pay_rate: Optional[Decimal],
) -> ResolvedRates:
    """
    Rates to freeze on a new ticket.

    The bill rate is the mean of the default rates of the named customers
    that exist (0 when none do), so a ticket shared by several customers is
    not billed at the sum of their rates. The pay rate is the driver's
    default. Both are rounded to cents, the precision they are stored at.
    """
    if not customer_names:
        raise ValidationError("At least one customer name is required")

    matched = [to_decimal(known_bill_rates[name]) for name in customer_names if name in known_bill_rates]
    if matched:
        bill_rate = quantize_cents(sum(matched, ZERO) / len(matched))
    else:
        bill_rate = ZERO

    return ResolvedRates(
        bill_rate=bill_rate,
        pay_rate=quantize_cents(to_decimal(driver_default_pay_rate)),
    )


class RateService:
    """Looks up customer defaults and resolves rates for a ticket."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_customers_by_name(self, names: List[str]) -> List[Customer]:
        if not names:
            return []
        async with storage_errors("look up customers"):
            result = await self.db.execute(select(Customer).where(Customer.name.in_(names)))
        return list(result.scalars().all())

    async def rates_for_ticket(self, raw_customer: str, driver: Driver) -> Tuple[List[str], ResolvedRates]:
        names = parse_customer_names(raw_customer)
        customers = await self.find_customers_by_name(names)
        known = {customer.name: customer.default_bill_rate for customer in customers}
        return names, resolve_rates(names, known, driver.default_pay_rate)
