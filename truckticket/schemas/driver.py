from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from truckticket.utils.money import MAX_AMOUNT


class DriverCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    default_pay_rate: Decimal = Field(..., ge=0, le=MAX_AMOUNT)
    pin: str


class DriverUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    default_pay_rate: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT)
    pin: Optional[str] = None


class DriverResponse(BaseModel):
    id: str
    user_id: str
    code: str
    name: str
    phone: Optional[str] = None
    default_pay_rate: Decimal
    email: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class DriverIdentity(BaseModel):
    id: str
    name: str
    code: str

    model_config = {"from_attributes": True}
