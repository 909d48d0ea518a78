"""Admin and driver dashboards, plus the driver pay history."""
from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, timedelta
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from truckticket.core.exceptions import NotFoundError
from truckticket.models.driver import Driver
from truckticket.models.ticket import Ticket, TicketStatus
from truckticket.schemas.dashboard import (
    AdminDashboardStats,
    DriverDashboard,
    PayHistoryLine,
    PayHistoryResponse,
    PayHistorySummary,
    RecentTicket,
    WeeklySnapshot,
    WeeklyTotals,
)
from truckticket.schemas.driver import DriverIdentity
from truckticket.services.ticket_query import month_bounds, parse_period
from truckticket.services.transactions import storage_errors
from truckticket.utils.money import ZERO, quantize_cents, to_decimal

logger = logging.getLogger(__name__)

RECENT_TICKET_LIMIT = 5
PAY_STATUS_SETTLED = "Up-to-date"
PAY_STATUS_PENDING = "Pending"


def week_bounds(today: date):
    """Sunday through Saturday of the week containing ``today``."""
    # date.weekday(): Monday == 0 ... Sunday == 6
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


class DashboardService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def admin_stats(self, today: Optional[date] = None) -> AdminDashboardStats:
        """
        Figures for the admin landing page.

        Pending tickets are counted across all time. Revenue, driver pay and
        the weekly breakdown cover approved tickets dated in the current month.
        """
        today = today or date.today()
        month_start, next_month = month_bounds(today.year, today.month)

        async with storage_errors("count pending tickets"):
            pending = await self.db.scalar(
                select(func.count(Ticket.id)).where(Ticket.status == TicketStatus.PENDING.value)
            )

        stmt = (
            select(Ticket.date, Ticket.total_bill, Ticket.total_pay)
            .where(
                Ticket.status == TicketStatus.APPROVED.value,
                Ticket.date >= month_start,
                Ticket.date < next_month,
            )
            .order_by(Ticket.date.asc())
        )
        revenue = ZERO
        driver_pay = ZERO
        weeks: Dict[int, WeeklyTotals] = OrderedDict()
        async with storage_errors("aggregate monthly totals"):
            result = await self.db.stream(stmt)
            async for ticket_date, total_bill, total_pay in result:
                bill = to_decimal(total_bill)
                pay = to_decimal(total_pay)
                revenue += bill
                driver_pay += pay
                week = ticket_date.isocalendar()[1]
                bucket = weeks.setdefault(week, WeeklyTotals(week=week))
                bucket.revenue += bill
                bucket.pay += pay

        for bucket in weeks.values():
            bucket.revenue = quantize_cents(bucket.revenue)
            bucket.pay = quantize_cents(bucket.pay)
        revenue = quantize_cents(revenue)
        driver_pay = quantize_cents(driver_pay)
        return AdminDashboardStats(
            unbilled_tickets=pending or 0,
            revenue=revenue,
            driver_pay=driver_pay,
            estimated_profit=revenue - driver_pay,
            weekly_data=list(weeks.values()),
        )

    async def driver_dashboard(self, driver_id: str, today: Optional[date] = None) -> DriverDashboard:
        driver = await self._get_driver(driver_id)
        week_start, week_end = week_bounds(today or date.today())

        async with storage_errors("load driver dashboard"):
            totals = (
                await self.db.execute(
                    select(
                        func.coalesce(func.sum(Ticket.quantity), 0),
                        func.coalesce(func.sum(Ticket.total_pay), 0),
                    ).where(
                        Ticket.driver_id == driver.id,
                        Ticket.status == TicketStatus.APPROVED.value,
                        Ticket.date >= week_start,
                        Ticket.date <= week_end,
                    )
                )
            ).one()
            recent = await self.db.execute(
                select(Ticket)
                .where(Ticket.driver_id == driver.id)
                .order_by(Ticket.date.desc(), Ticket.created_at.desc())
                .limit(RECENT_TICKET_LIMIT)
            )
            recent_tickets = [
                RecentTicket(
                    id=ticket.id,
                    date=ticket.date,
                    customer=ticket.customer,
                    hours=ticket.quantity,
                    status=ticket.status,
                    ticket_number=ticket.ticket_number,
                )
                for ticket in recent.scalars().all()
            ]

        return DriverDashboard(
            driver=DriverIdentity.model_validate(driver),
            weekly_snapshot=WeeklySnapshot(
                week_start=week_start,
                week_end=week_end,
                total_hours=to_decimal(totals[0]),
                estimated_pay=quantize_cents(to_decimal(totals[1])),
            ),
            recent_tickets=recent_tickets,
        )

    async def pay_history(self, driver_id: str, period: Optional[str] = None) -> PayHistoryResponse:
        """
        A driver's tickets with hours and pay, optionally for one month.

        An unparseable period is ignored and the full history is returned.
        The summary is "Up-to-date" only when every listed ticket is approved.
        """
        driver = await self._get_driver(driver_id)

        stmt = select(Ticket).where(Ticket.driver_id == driver.id)
        parsed = parse_period(period)
        if parsed:
            start, end = month_bounds(*parsed)
            stmt = stmt.where(Ticket.date >= start, Ticket.date < end)
        elif period:
            logger.debug(f"Ignoring unparseable pay period {period!r}")
        stmt = stmt.order_by(Ticket.date.desc(), Ticket.created_at.desc())

        lines = []
        total_hours = ZERO
        gross_pay = ZERO
        all_approved = True
        async with storage_errors("load pay history"):
            result = await self.db.stream_scalars(stmt)
            async for ticket in result:
                total_hours += to_decimal(ticket.quantity)
                gross_pay += to_decimal(ticket.total_pay)
                all_approved = all_approved and ticket.status == TicketStatus.APPROVED.value
                lines.append(
                    PayHistoryLine(
                        date=ticket.date,
                        customer=ticket.customer,
                        ticket_number=ticket.ticket_number,
                        hours=ticket.quantity,
                        amount=ticket.total_pay,
                        status=ticket.status,
                    )
                )

        return PayHistoryResponse(
            period=f"{parsed[0]:04d}-{parsed[1]:02d}" if parsed else None,
            summary=PayHistorySummary(
                total_hours=total_hours,
                gross_pay=quantize_cents(gross_pay),
                status=PAY_STATUS_SETTLED if all_approved else PAY_STATUS_PENDING,
            ),
            tickets=lines,
        )

    async def _get_driver(self, driver_id: str) -> Driver:
        async with storage_errors("fetch driver"):
            driver = await self.db.get(Driver, driver_id)
        if not driver:
            raise NotFoundError("Driver not found", driver_id=driver_id)
        return driver
