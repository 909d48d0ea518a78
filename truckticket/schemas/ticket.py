"""Schemas for ticket submission, admin corrections and listings."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from truckticket.utils.money import MAX_AMOUNT


class TicketCreate(BaseModel):
    """Driver submission. Rates and status are never taken from the driver."""
    date: date
    truck_number: str = Field(..., min_length=1, max_length=50)
    customer: str = Field(..., min_length=1, max_length=255)
    job_type: str = Field(..., min_length=1, max_length=255)
    equipment_type: Optional[str] = Field(None, max_length=255)
    ticket_number: str = Field(..., min_length=1, max_length=100)
    quantity: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
    photo_path: Optional[str] = Field(None, max_length=500)

    @field_validator("truck_number", "customer", "job_type", "ticket_number")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class TicketUpdate(BaseModel):
    """Admin correction. Any subset of the fields; omitted fields keep their stored value."""
    quantity: Optional[Decimal] = Field(None, le=MAX_AMOUNT)
    bill_rate: Optional[Decimal] = Field(None, le=MAX_AMOUNT)
    pay_rate: Optional[Decimal] = Field(None, le=MAX_AMOUNT)
    status: Optional[str] = None

    model_config = {"extra": "ignore"}


class TicketStatusUpdate(BaseModel):
    status: str


class TicketResponse(BaseModel):
    id: str
    driver_id: str
    date: date
    truck_number: Optional[str] = None
    customer: str
    job_type: Optional[str] = None
    equipment_type: Optional[str] = None
    ticket_number: str
    quantity: Decimal
    photo_path: Optional[str] = None
    bill_rate: Decimal
    pay_rate: Decimal
    total_bill: Decimal
    total_pay: Decimal
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TicketListItem(TicketResponse):
    """Ticket joined with its driver and the customer record matching its name."""
    driver_name: Optional[str] = None
    driver_code: Optional[str] = None
    customer_name: Optional[str] = None


class TicketCreateResponse(BaseModel):
    id: str
    ticket_number: str
    status: str


class DriverTicketResponse(BaseModel):
    """Ticket as shown to the driver who submitted it."""
    id: str
    date: date
    truck_number: Optional[str] = None
    customer: str
    job_type: Optional[str] = None
    ticket_number: str
    quantity: Decimal
    photo_path: Optional[str] = None
    status: str
    total_bill: Decimal
    total_pay: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}
