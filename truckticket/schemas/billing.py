"""Invoice and settlement documents handed to renderers.

Totals are computed by the billing service; renderers display them as-is.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from truckticket.schemas.driver import DriverIdentity


class InvoiceLine(BaseModel):
    """One approved ticket on a customer invoice."""
    ticket_id: str
    date: date
    ticket_number: str
    description: Optional[str] = None
    truck_number: Optional[str] = None
    driver_name: Optional[str] = None
    driver_code: Optional[str] = None
    quantity: Decimal
    bill_rate: Decimal
    total_bill: Decimal


class InvoiceResponse(BaseModel):
    customer_id: str
    customer: str
    start_date: date
    end_date: date
    tickets: List[InvoiceLine] = []
    subtotal: Decimal = Field(default=Decimal("0.00"))
    gst_rate: Decimal
    gst: Decimal = Field(default=Decimal("0.00"))
    total: Decimal = Field(default=Decimal("0.00"))


class SettlementLine(BaseModel):
    """One ticket of any status on a driver settlement."""
    ticket_id: str
    date: date
    ticket_number: str
    customer: str
    customer_name: Optional[str] = None
    job_type: Optional[str] = None
    truck_number: Optional[str] = None
    quantity: Decimal
    pay_rate: Decimal
    total_pay: Decimal
    status: str


class SettlementResponse(BaseModel):
    driver: DriverIdentity
    start_date: date
    end_date: date
    tickets: List[SettlementLine] = []
    total_pay: Decimal = Field(default=Decimal("0.00"))


class DocumentMeta(BaseModel):
    """What a renderer needs besides the figures."""
    document_number: str
    issued_on: date
    filename: str


class InvoiceDocument(BaseModel):
    meta: DocumentMeta
    invoice: InvoiceResponse


class SettlementDocument(BaseModel):
    meta: DocumentMeta
    settlement: SettlementResponse
