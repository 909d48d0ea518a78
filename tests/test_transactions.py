import uuid
from decimal import Decimal

import pytest
from sqlalchemy import func, select, text

from truckticket.core.exceptions import ConflictError, StorageError, ValidationError
from truckticket.models import Customer
from truckticket.schemas.customer import CustomerCreate
from truckticket.services.customers import CustomerService
from truckticket.services.transactions import storage_errors, unit_of_work


def _customer(name: str) -> Customer:
    return Customer(id=str(uuid.uuid4()), name=name, default_bill_rate=Decimal("10.00"))


async def _count_customers(session_factory) -> int:
    async with session_factory() as other:
        return await other.scalar(select(func.count(Customer.id)))


async def test_storage_failure_rolls_back_flushed_rows(db, session_factory):
    with pytest.raises(StorageError) as exc_info:
        async with unit_of_work(db, "create customer"):
            db.add(_customer("Acme"))
            await db.flush()
            await db.execute(text("SELECT * FROM no_such_table"))

    assert exc_info.value.message == "Failed to create customer"
    assert await _count_customers(session_factory) == 0


async def test_integrity_error_becomes_conflict(db, session_factory):
    async with unit_of_work(db, "create customer"):
        db.add(_customer("Acme"))

    with pytest.raises(ConflictError) as exc_info:
        async with unit_of_work(db, "create customer", conflict_message="Customer name already exists"):
            db.add(_customer("Acme"))

    assert exc_info.value.message == "Customer name already exists"
    assert await _count_customers(session_factory) == 1


async def test_integrity_error_without_conflict_message_is_storage_error(db, session_factory):
    async with unit_of_work(db, "create customer"):
        db.add(_customer("Acme"))

    with pytest.raises(StorageError):
        async with unit_of_work(db, "create customer"):
            db.add(_customer("Acme"))

    assert await _count_customers(session_factory) == 1


async def test_racing_duplicate_name_surfaces_as_conflict(db, session_factory, monkeypatch):
    async def skip_check(self, name, exclude_id=None):
        return None

    service = CustomerService(db)
    await service.create_customer(CustomerCreate(name="Acme", default_bill_rate=Decimal("10")))
    monkeypatch.setattr(CustomerService, "_ensure_name_available", skip_check)

    with pytest.raises(ConflictError) as exc_info:
        await service.create_customer(CustomerCreate(name="Acme", default_bill_rate=Decimal("12")))

    assert exc_info.value.message == "Customer name already exists"
    assert await _count_customers(session_factory) == 1


async def test_service_errors_pass_through_and_roll_back(db, session_factory):
    with pytest.raises(ValidationError):
        async with unit_of_work(db, "create customer"):
            db.add(_customer("Acme"))
            await db.flush()
            raise ValidationError("bad input")

    assert await _count_customers(session_factory) == 0


async def test_storage_errors_translates_read_failures(db):
    with pytest.raises(StorageError) as exc_info:
        async with storage_errors("list customers"):
            await db.execute(text("SELECT * FROM no_such_table"))

    assert exc_info.value.message == "Failed to list customers"
