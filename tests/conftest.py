import os
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from truckticket.core.db import get_db
from truckticket.main import app
from truckticket.models import Base, Ticket
from truckticket.schemas.customer import CustomerCreate
from truckticket.schemas.driver import DriverCreate
from truckticket.schemas.ticket import TicketCreate
from truckticket.services.customers import CustomerService
from truckticket.services.drivers import DriverService
from truckticket.services.tickets import TicketService

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_customer(db):
    async def _make(name: str, rate: str):
        return await CustomerService(db).create_customer(
            CustomerCreate(name=name, default_bill_rate=Decimal(rate))
        )

    return _make


@pytest.fixture
def make_driver(db):
    async def _make(code: str = "D001", name: str = "Sam Carter", pay_rate: str = "20.00", pin: str = "1234"):
        return await DriverService(db).create_driver(
            DriverCreate(code=code, name=name, phone="555-0100", default_pay_rate=Decimal(pay_rate), pin=pin)
        )

    return _make


@pytest.fixture
def submit_ticket(db):
    async def _submit(
        driver_id: str,
        customer: str,
        quantity: str,
        ticket_date: date = date(2025, 11, 10),
        ticket_number: str = "T-100",
    ) -> Ticket:
        payload = TicketCreate(
            date=ticket_date,
            truck_number="TRK-7",
            customer=customer,
            job_type="Hauling",
            ticket_number=ticket_number,
            quantity=Decimal(quantity),
        )
        return await TicketService(db).create_ticket(driver_id, payload)

    return _submit


@pytest.fixture
def approve(db):
    async def _approve(ticket_id: str) -> Ticket:
        return await TicketService(db).update_status(ticket_id, "Approved")

    return _approve
