"""Schemas for admin and driver dashboards."""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from truckticket.schemas.driver import DriverIdentity


class WeeklyTotals(BaseModel):
    week: int  # ISO week number
    revenue: Decimal = Field(default=Decimal("0.00"))
    pay: Decimal = Field(default=Decimal("0.00"))


class AdminDashboardStats(BaseModel):
    unbilled_tickets: int
    revenue: Decimal
    driver_pay: Decimal
    estimated_profit: Decimal
    weekly_data: List[WeeklyTotals] = []


class WeeklySnapshot(BaseModel):
    week_start: date
    week_end: date
    total_hours: Decimal = Field(default=Decimal("0.00"))
    estimated_pay: Decimal = Field(default=Decimal("0.00"))


class RecentTicket(BaseModel):
    id: str
    date: date
    customer: str
    hours: Decimal
    status: str
    ticket_number: str

    model_config = {"from_attributes": True}


class DriverDashboard(BaseModel):
    driver: DriverIdentity
    weekly_snapshot: WeeklySnapshot
    recent_tickets: List[RecentTicket] = []


class PayHistoryLine(BaseModel):
    date: date
    customer: str
    ticket_number: str
    hours: Decimal
    amount: Decimal
    status: str


class PayHistorySummary(BaseModel):
    total_hours: Decimal
    gross_pay: Decimal
    status: str  # "Up-to-date" when every ticket is approved, else "Pending"


class PayHistoryResponse(BaseModel):
    period: Optional[str] = None
    summary: PayHistorySummary
    tickets: List[PayHistoryLine] = []
