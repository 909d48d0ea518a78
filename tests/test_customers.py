from decimal import Decimal

import pytest

from truckticket.core.exceptions import ConflictError, NotFoundError, ValidationError
from truckticket.schemas.customer import BillRateUpdate, CustomerCreate, CustomerUpdate
from truckticket.services.customers import CustomerService


async def test_create_and_list_sorted_by_name(db, make_customer):
    await make_customer("Zeta", "10")
    await make_customer("Acme", "12.345")
    customers = await CustomerService(db).list_customers()
    assert [c.name for c in customers] == ["Acme", "Zeta"]
    assert customers[0].default_bill_rate == Decimal("12.35")


async def test_duplicate_name_conflicts(db, make_customer):
    await make_customer("Acme", "10")
    with pytest.raises(ConflictError):
        await make_customer("Acme", "20")


async def test_update_customer(db, make_customer):
    customer = await make_customer("Acme", "10")
    updated = await CustomerService(db).update_customer(
        customer.id, CustomerUpdate(name="Acme Ltd", default_bill_rate=Decimal("11"))
    )
    assert updated.name == "Acme Ltd"
    assert updated.default_bill_rate == Decimal("11.00")


async def test_update_requires_fields(db, make_customer):
    customer = await make_customer("Acme", "10")
    with pytest.raises(ValidationError):
        await CustomerService(db).update_customer(customer.id, CustomerUpdate())


async def test_rename_onto_existing_name_conflicts(db, make_customer):
    await make_customer("Acme", "10")
    beta = await make_customer("Beta", "10")
    with pytest.raises(ConflictError):
        await CustomerService(db).update_customer(beta.id, CustomerUpdate(name="Acme"))


async def test_update_unknown_customer(db):
    with pytest.raises(NotFoundError):
        await CustomerService(db).update_customer("missing", CustomerUpdate(default_bill_rate=Decimal("1")))


async def test_delete_customer_keeps_tickets(db, make_customer, make_driver, submit_ticket):
    customer = await make_customer("Acme", "10")
    driver = await make_driver()
    ticket = await submit_ticket(driver.id, "Acme", "1")
    service = CustomerService(db)

    await service.delete_customer(customer.id)

    assert await service.list_customers() == []
    with pytest.raises(NotFoundError):
        await service.get_customer(customer.id)
    assert ticket.customer == "Acme"


async def test_update_bill_rates_batch(db, make_customer):
    acme = await make_customer("Acme", "10")
    beta = await make_customer("Beta", "20")
    service = CustomerService(db)

    count = await service.update_bill_rates([
        BillRateUpdate(id=acme.id, default_bill_rate=Decimal("15.5")),
        BillRateUpdate(id=beta.id, default_bill_rate=Decimal("25")),
    ])

    assert count == 2
    rates = {c.name: c.default_bill_rate for c in await service.list_bill_rates()}
    assert rates == {"Acme": Decimal("15.50"), "Beta": Decimal("25.00")}


async def test_update_bill_rates_unknown_id_rolls_back_batch(db, make_customer, session_factory):
    acme = await make_customer("Acme", "10")
    acme_id = acme.id
    service = CustomerService(db)

    with pytest.raises(NotFoundError):
        await service.update_bill_rates([
            BillRateUpdate(id=acme_id, default_bill_rate=Decimal("99")),
            BillRateUpdate(id="missing", default_bill_rate=Decimal("1")),
        ])

    async with session_factory() as other:
        stored = await CustomerService(other).get_customer(acme_id)
        assert stored.default_bill_rate == Decimal("10.00")


async def test_rate_change_does_not_reprice_tickets(db, make_customer, make_driver, submit_ticket):
    acme = await make_customer("Acme", "10")
    driver = await make_driver()
    ticket = await submit_ticket(driver.id, "Acme", "3")

    await CustomerService(db).update_bill_rates([BillRateUpdate(id=acme.id, default_bill_rate=Decimal("50"))])

    await db.refresh(ticket)
    assert ticket.bill_rate == Decimal("10.00")
    assert ticket.total_bill == Decimal("30.00")


async def test_create_customer_rejects_blank_name(db):
    with pytest.raises(ValidationError):
        await CustomerService(db).create_customer(CustomerCreate(name="   ", default_bill_rate=Decimal("1")))
