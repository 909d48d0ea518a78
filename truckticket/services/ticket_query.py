"""Filtered ticket listings for the admin ticket board."""

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Select, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from truckticket.core.exceptions import NotFoundError
from truckticket.models.customer import Customer
from truckticket.models.driver import Driver
from truckticket.models.ticket import Ticket
from truckticket.schemas.ticket import TicketListItem, TicketResponse
from truckticket.services.transactions import storage_errors

logger = logging.getLogger(__name__)

ALL_SENTINEL = "All"

_NUMERIC_PERIOD = re.compile(r"^(\d{4})-(\d{1,2})$")
_YEAR = re.compile(r"^\d{4}$")

# "november" -> 11, "nov" -> 11
_MONTHS: Dict[str, int] = {}
for _number in range(1, 13):
    _MONTHS[calendar.month_name[_number].lower()] = _number
    _MONTHS[calendar.month_abbr[_number].lower()] = _number


def parse_period(token: Optional[str]) -> Optional[Tuple[int, int]]:
    """
    Parse a month filter into ``(year, month)``.

    Accepts ``2025-11`` and ``November 2025`` (or ``Nov 2025``, any case).
    Returns None for anything else, including out of range months.

    Example:
        >>> parse_period("November 2025")
        (2025, 11)
        >>> parse_period("garbage") is None
        True
    """
    if not isinstance(token, str):
        return None
    token = token.strip()
    if not token:
        return None

    match = _NUMERIC_PERIOD.match(token)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
    else:
        parts = token.split()
        if len(parts) != 2 or not _YEAR.match(parts[1]):
            return None
        month = _MONTHS.get(parts[0].lower().rstrip("."))
        if month is None:
            return None
        year = int(parts[1])

    if not 1 <= month <= 12 or year < 1:
        return None
    return year, month


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First day of the month and first day of the following month."""
    start = date(year, month, 1)
    if month == 12:
        return start, date(year + 1, 1, 1)
    return start, date(year, month + 1, 1)


def _clean(value: Any, sentinel: Optional[str] = None) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if not value or value == sentinel:
        return None
    return value


@dataclass(frozen=True)
class TicketFilter:
    """Optional ticket criteria, combined with AND. Blank values mean no filter."""
    period: Optional[str] = None
    customer: Optional[str] = None
    driver: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None


def compile_ticket_filter(criteria: TicketFilter) -> List[ColumnElement[bool]]:
    """Turn criteria into WHERE clauses.

    Values that are missing or blank after trimming produce no clause. A
    period that does not parse is dropped rather than failing the listing.
    """
    clauses: List[ColumnElement[bool]] = []

    raw_period = _clean(criteria.period)
    period = parse_period(raw_period)
    if period:
        start, end = month_bounds(*period)
        clauses.append(Ticket.date >= start)
        clauses.append(Ticket.date < end)
    elif raw_period:
        logger.debug(f"Ignoring unparseable period filter {raw_period!r}")

    customer = _clean(criteria.customer, ALL_SENTINEL)
    if customer:
        clauses.append(Ticket.customer == customer)

    driver = _clean(criteria.driver, ALL_SENTINEL)
    if driver:
        clauses.append(Driver.name == driver)

    status = _clean(criteria.status)
    if status:
        clauses.append(Ticket.status == status)

    search = _clean(criteria.search)
    if search:
        clauses.append(func.lower(Ticket.ticket_number).contains(search.lower(), autoescape=True))

    return clauses


def ticket_listing_query(clauses: List[ColumnElement[bool]]) -> Select:
    stmt = (
        select(
            Ticket,
            Driver.name.label("driver_name"),
            Driver.code.label("driver_code"),
            Customer.name.label("customer_name"),
        )
        .outerjoin(Driver, Ticket.driver_id == Driver.id)
        .outerjoin(Customer, Ticket.customer == Customer.name)
    )
    if clauses:
        stmt = stmt.where(and_(*clauses))
    return stmt.order_by(Ticket.date.desc(), Ticket.created_at.desc())


def _listing_item(ticket: Ticket, driver_name, driver_code, customer_name) -> TicketListItem:
    return TicketListItem(
        **TicketResponse.model_validate(ticket).model_dump(),
        driver_name=driver_name,
        driver_code=driver_code,
        customer_name=customer_name,
    )


class TicketQueryService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_tickets(self, criteria: Optional[TicketFilter] = None) -> List[TicketListItem]:
        """Tickets matching the criteria, newest first."""
        stmt = ticket_listing_query(compile_ticket_filter(criteria or TicketFilter()))
        async with storage_errors("list tickets"):
            result = await self.db.execute(stmt)
            rows = result.all()
        return [_listing_item(*row) for row in rows]

    async def get_ticket_detail(self, ticket_id: str) -> TicketListItem:
        stmt = ticket_listing_query([Ticket.id == ticket_id])
        async with storage_errors("fetch ticket"):
            result = await self.db.execute(stmt)
            row = result.first()
        if row is None:
            raise NotFoundError("Ticket not found", ticket_id=ticket_id)
        return _listing_item(*row)
