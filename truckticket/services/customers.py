"""Customer records and their default bill rates."""
from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from truckticket.core.exceptions import ConflictError, NotFoundError, ValidationError
from truckticket.models.customer import Customer
from truckticket.schemas.customer import BillRateUpdate, CustomerCreate, CustomerUpdate
from truckticket.services.tickets import normalize_amount
from truckticket.services.transactions import storage_errors, unit_of_work

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "Customer name already exists"


class CustomerService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_customers(self) -> List[Customer]:
        async with storage_errors("list customers"):
            result = await self.db.execute(select(Customer).order_by(Customer.name.asc()))
        return list(result.scalars().all())

    async def list_customer_options(self) -> List[Customer]:
        """Same ordering as ``list_customers``; the driver form only needs id and name."""
        return await self.list_customers()

    async def get_customer(self, customer_id: str) -> Customer:
        async with storage_errors("fetch customer"):
            customer = await self.db.get(Customer, customer_id)
        if not customer:
            raise NotFoundError("Customer not found", customer_id=customer_id)
        return customer

    async def create_customer(self, payload: CustomerCreate) -> Customer:
        name = payload.name.strip()
        if not name:
            raise ValidationError("Name and default bill rate are required")
        await self._ensure_name_available(name)

        customer = Customer(
            id=str(uuid.uuid4()),
            name=name,
            default_bill_rate=normalize_amount(payload.default_bill_rate, "default_bill_rate"),
        )
        async with unit_of_work(self.db, "create customer", conflict_message=DUPLICATE_NAME):
            self.db.add(customer)
        await self.db.refresh(customer)
        logger.info(f"Created customer {customer.name} at {customer.default_bill_rate}")
        return customer

    async def update_customer(self, customer_id: str, payload: CustomerUpdate) -> Customer:
        changes = payload.model_dump(exclude_none=True)
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                del changes["name"]
        if not changes:
            raise ValidationError("No fields to update")

        customer = await self.get_customer(customer_id)
        if "name" in changes and changes["name"] != customer.name:
            await self._ensure_name_available(changes["name"], exclude_id=customer.id)
        if "default_bill_rate" in changes:
            changes["default_bill_rate"] = normalize_amount(changes["default_bill_rate"], "default_bill_rate")

        async with unit_of_work(self.db, "update customer", conflict_message=DUPLICATE_NAME):
            for field, value in changes.items():
                setattr(customer, field, value)
        await self.db.refresh(customer)
        logger.info(f"Updated customer {customer.id}: {sorted(changes)}")
        return customer

    async def delete_customer(self, customer_id: str) -> None:
        """Remove a customer. Tickets keep the name they were submitted with."""
        customer = await self.get_customer(customer_id)
        async with unit_of_work(self.db, "delete customer"):
            await self.db.delete(customer)
        logger.info(f"Deleted customer {customer_id}")

    async def list_bill_rates(self) -> List[Customer]:
        return await self.list_customers()

    async def update_bill_rates(self, rates: Sequence[BillRateUpdate]) -> int:
        """
        Set several customers' default bill rates in one transaction.

        Either every row is updated or none is: an unknown customer id rolls
        back the whole batch. Existing tickets keep their frozen rates.
        """
        normalized = [
            (rate.id, normalize_amount(rate.default_bill_rate, "default_bill_rate"))
            for rate in rates
        ]
        async with unit_of_work(self.db, "update bill rates"):
            for customer_id, bill_rate in normalized:
                result = await self.db.execute(
                    update(Customer)
                    .where(Customer.id == customer_id)
                    .values(default_bill_rate=bill_rate)
                )
                if result.rowcount == 0:
                    raise NotFoundError("Customer not found", customer_id=customer_id)
        logger.info(f"Updated bill rates for {len(normalized)} customers")
        return len(normalized)

    async def _ensure_name_available(self, name: str, exclude_id: Optional[str] = None) -> None:
        stmt = select(Customer.id).where(Customer.name == name)
        if exclude_id:
            stmt = stmt.where(Customer.id != exclude_id)
        async with storage_errors("check customer name"):
            result = await self.db.execute(stmt)
        if result.first() is not None:
            raise ConflictError(DUPLICATE_NAME, name=name)
