from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from truckticket.utils.money import MAX_AMOUNT


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    default_bill_rate: Decimal = Field(..., ge=0, le=MAX_AMOUNT)


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    default_bill_rate: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)


class CustomerResponse(BaseModel):
    id: str
    name: str
    default_bill_rate: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CustomerOption(BaseModel):
    """Customer entry for the driver ticket form dropdown."""
    id: str
    name: str

    model_config = {"from_attributes": True}


class BillRate(BaseModel):
    id: str
    name: str
    default_bill_rate: Decimal

    model_config = {"from_attributes": True}


class BillRateUpdate(BaseModel):
    id: str
    default_bill_rate: Decimal = Field(..., ge=0, le=MAX_AMOUNT)


class BillRatesUpdateRequest(BaseModel):
    rates: List[BillRateUpdate]
