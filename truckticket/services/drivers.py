"""Driver records and the login account created alongside each driver."""
from __future__ import annotations

import logging
import re
import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from truckticket.core.config import get_settings
from truckticket.core.exceptions import ConflictError, NotFoundError, ValidationError
from truckticket.core.security import hash_pin
from truckticket.models.driver import Driver
from truckticket.models.ticket import Ticket
from truckticket.models.user import User, UserRole
from truckticket.schemas.driver import DriverCreate, DriverResponse, DriverUpdate
from truckticket.services.tickets import normalize_amount
from truckticket.services.transactions import storage_errors, unit_of_work

logger = logging.getLogger(__name__)

PIN_PATTERN = re.compile(r"^\d{4}$")
DUPLICATE_CODE = "User ID code already exists"


def validate_pin(pin: Optional[str]) -> str:
    if not isinstance(pin, str) or not PIN_PATTERN.match(pin):
        raise ValidationError("PIN must be exactly 4 digits")
    return pin


def driver_email(code: str) -> str:
    return f"driver_{code}@{get_settings().driver_email_domain}"


def _driver_response(driver: Driver, email: Optional[str]) -> DriverResponse:
    return DriverResponse(
        id=driver.id,
        user_id=driver.user_id,
        code=driver.code,
        name=driver.name,
        phone=driver.phone,
        default_pay_rate=driver.default_pay_rate,
        email=email,
        created_at=driver.created_at,
    )


class DriverService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_drivers(self) -> List[DriverResponse]:
        stmt = (
            select(Driver, User.email)
            .join(User, Driver.user_id == User.id)
            .order_by(Driver.created_at.desc(), Driver.name.asc())
        )
        async with storage_errors("list drivers"):
            result = await self.db.execute(stmt)
            rows = result.all()
        return [_driver_response(driver, email) for driver, email in rows]

    async def get_driver(self, driver_id: str) -> Driver:
        async with storage_errors("fetch driver"):
            driver = await self.db.get(Driver, driver_id)
        if not driver:
            raise NotFoundError("Driver not found", driver_id=driver_id)
        return driver

    async def describe_driver(self, driver_id: str) -> DriverResponse:
        driver = await self.get_driver(driver_id)
        async with storage_errors("fetch driver account"):
            user = await self.db.get(User, driver.user_id)
        return _driver_response(driver, user.email if user else None)

    async def create_driver(self, payload: DriverCreate) -> DriverResponse:
        """
        Create a driver together with its login account.

        Both rows are written in one transaction. The PIN is stored only as a
        bcrypt hash, on the driver and as the account password.
        """
        code = payload.code.strip()
        name = payload.name.strip()
        if not code or not name:
            raise ValidationError("User ID code, name, default pay rate, and PIN are required")
        pin = validate_pin(payload.pin)
        await self._ensure_code_available(code)

        pin_hash = hash_pin(pin)
        user = User(
            id=str(uuid.uuid4()),
            email=driver_email(code),
            password_hash=pin_hash,
            role=UserRole.DRIVER.value,
        )
        driver = Driver(
            id=str(uuid.uuid4()),
            code=code,
            name=name,
            phone=payload.phone or None,
            default_pay_rate=normalize_amount(payload.default_pay_rate, "default_pay_rate"),
            pin_hash=pin_hash,
        )
        driver.user = user

        async with unit_of_work(self.db, "create driver", conflict_message=DUPLICATE_CODE):
            self.db.add(user)
            self.db.add(driver)
        # User.driver cascades refresh-expire, so the user is refreshed first.
        await self.db.refresh(user)
        await self.db.refresh(driver)

        logger.info(f"Created driver {driver.code} ({driver.name})")
        return _driver_response(driver, user.email)

    async def update_driver(self, driver_id: str, payload: DriverUpdate) -> DriverResponse:
        changes = payload.model_dump(exclude_unset=True)
        pin = changes.pop("pin", None)

        driver = await self.get_driver(driver_id)
        fields = {}
        code = (changes.get("code") or "").strip()
        if code:
            if code != driver.code:
                await self._ensure_code_available(code, exclude_id=driver.id)
            fields["code"] = code
        name = (changes.get("name") or "").strip()
        if name:
            fields["name"] = name
        if "phone" in changes:
            fields["phone"] = changes["phone"] or None
        if changes.get("default_pay_rate") is not None:
            fields["default_pay_rate"] = normalize_amount(changes["default_pay_rate"], "default_pay_rate")
        if pin:
            fields["pin_hash"] = hash_pin(validate_pin(pin))
        if not fields:
            raise ValidationError("No fields to update")

        async with unit_of_work(self.db, "update driver", conflict_message=DUPLICATE_CODE):
            for field, value in fields.items():
                setattr(driver, field, value)
            if "pin_hash" in fields:
                user = await self.db.get(User, driver.user_id)
                if user:
                    user.password_hash = fields["pin_hash"]
        await self.db.refresh(driver)

        logger.info(f"Updated driver {driver_id}: {sorted(fields)}")
        return await self.describe_driver(driver_id)

    async def delete_driver(self, driver_id: str) -> None:
        """Delete a driver, every ticket they submitted and their login account."""
        driver = await self.get_driver(driver_id)
        user_id = driver.user_id

        async with unit_of_work(self.db, "delete driver"):
            tickets = await self.db.execute(delete(Ticket).where(Ticket.driver_id == driver_id))
            await self.db.execute(delete(Driver).where(Driver.id == driver_id))
            await self.db.execute(delete(User).where(User.id == user_id))

        logger.info(f"Deleted driver {driver_id} and {tickets.rowcount} tickets")

    async def _ensure_code_available(self, code: str, exclude_id: Optional[str] = None) -> None:
        stmt = select(Driver.id).where(Driver.code == code)
        if exclude_id:
            stmt = stmt.where(Driver.id != exclude_id)
        async with storage_errors("check driver code"):
            result = await self.db.execute(stmt)
        if result.first() is not None:
            raise ConflictError(DUPLICATE_CODE, code=code)
