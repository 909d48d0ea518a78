import random
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from truckticket.core.exceptions import NotFoundError, ValidationError
from truckticket.schemas.ticket import TicketCreate, TicketUpdate
from truckticket.services.tickets import (
    TicketService,
    normalize_amount,
    price_new_ticket,
    validate_status,
)


def test_price_new_ticket_is_exact():
    totals = price_new_ticket(Decimal("12.34"), Decimal("5.67"), Decimal("3.21"))
    assert totals.total_bill == Decimal("69.9678")
    assert totals.total_pay == Decimal("39.6114")


def test_price_new_ticket_rejects_negative():
    with pytest.raises(ValidationError):
        price_new_ticket(Decimal("-1"), Decimal("1"), Decimal("1"))


def test_normalize_amount():
    assert normalize_amount("2.345", "quantity") == Decimal("2.35")
    assert normalize_amount(7, "quantity") == Decimal("7.00")
    with pytest.raises(ValidationError):
        normalize_amount("abc", "quantity")
    with pytest.raises(ValidationError):
        normalize_amount("-0.01", "bill_rate")


@pytest.mark.parametrize("value", ["1e30", "100000000", "99999999.999", "Infinity", "NaN"])
def test_normalize_amount_rejects_out_of_range(value):
    with pytest.raises(ValidationError):
        normalize_amount(value, "quantity")


def test_normalize_amount_accepts_column_maximum():
    assert normalize_amount("99999999.99", "bill_rate") == Decimal("99999999.99")


def test_validate_status():
    assert validate_status("Rejected") == "Rejected"
    with pytest.raises(ValidationError):
        validate_status("approved")
    with pytest.raises(ValidationError):
        validate_status(None)


async def test_create_ticket_freezes_current_rates(db, make_customer, make_driver, submit_ticket):
    await make_customer("Acme", "100.00")
    await make_customer("Beta", "150.00")
    driver = await make_driver(pay_rate="25.00")

    ticket = await submit_ticket(driver.id, "Acme, Beta, Acme", "8.5")

    assert ticket.customer == "Acme, Beta"
    assert ticket.status == "Pending"
    assert ticket.bill_rate == Decimal("125.00")
    assert ticket.pay_rate == Decimal("25.00")
    assert ticket.total_bill == Decimal("1062.50")
    assert ticket.total_pay == Decimal("212.50")


async def test_create_ticket_unknown_customer_bills_zero(db, make_driver, submit_ticket):
    driver = await make_driver()
    ticket = await submit_ticket(driver.id, "Nobody Inc", "3")
    assert ticket.bill_rate == Decimal("0")
    assert ticket.total_bill == Decimal("0")
    assert ticket.total_pay == Decimal("60.00")


async def test_create_ticket_unknown_driver(db):
    payload = TicketCreate(
        date=date(2025, 11, 3),
        truck_number="T1",
        customer="Acme",
        job_type="Hauling",
        ticket_number="X-1",
        quantity=Decimal("1"),
    )
    with pytest.raises(NotFoundError):
        await TicketService(db).create_ticket("missing", payload)


async def test_create_ticket_blank_customer_list(db, make_driver):
    driver = await make_driver()
    payload = TicketCreate(
        date=date(2025, 11, 3),
        truck_number="T1",
        customer=" , ",
        job_type="Hauling",
        ticket_number="X-1",
        quantity=Decimal("1"),
    )
    with pytest.raises(ValidationError):
        await TicketService(db).create_ticket(driver.id, payload)


async def test_partial_update_keeps_absent_fields(db, make_customer, make_driver, submit_ticket):
    await make_customer("Acme", "100.00")
    driver = await make_driver(pay_rate="20.00")
    ticket = await submit_ticket(driver.id, "Acme", "10")

    updated = await TicketService(db).apply_partial_update(ticket.id, {"quantity": Decimal("12")})

    assert updated.quantity == Decimal("12.00")
    assert updated.bill_rate == Decimal("100.00")
    assert updated.pay_rate == Decimal("20.00")
    assert updated.total_bill == Decimal("1200.00")
    assert updated.total_pay == Decimal("240.00")
    assert updated.status == "Pending"


async def test_partial_update_treats_null_as_absent(db, make_customer, make_driver, submit_ticket):
    await make_customer("Acme", "100.00")
    driver = await make_driver(pay_rate="20.00")
    ticket = await submit_ticket(driver.id, "Acme", "10")

    updated = await TicketService(db).apply_partial_update(
        ticket.id, TicketUpdate(bill_rate=Decimal("90"), quantity=None)
    )
    assert updated.quantity == Decimal("10.00")
    assert updated.total_bill == Decimal("900.00")


async def test_status_only_update_recomputes_totals(db, make_customer, make_driver, submit_ticket):
    await make_customer("Acme", "100.00")
    driver = await make_driver(pay_rate="20.00")
    ticket = await submit_ticket(driver.id, "Acme", "2")

    updated = await TicketService(db).update_status(ticket.id, "Approved")
    assert updated.status == "Approved"
    assert updated.total_bill == updated.quantity * updated.bill_rate
    assert updated.total_pay == updated.quantity * updated.pay_rate


async def test_status_moves_freely(db, make_driver, submit_ticket):
    driver = await make_driver()
    ticket = await submit_ticket(driver.id, "Acme", "1")
    service = TicketService(db)
    for status in ("Approved", "Rejected", "Pending", "Approved"):
        ticket = await service.update_status(ticket.id, status)
        assert ticket.status == status


async def test_empty_patch_is_rejected_and_ticket_untouched(db, make_customer, make_driver, submit_ticket):
    await make_customer("Acme", "100.00")
    driver = await make_driver()
    ticket = await submit_ticket(driver.id, "Acme", "4")
    service = TicketService(db)

    with pytest.raises(ValidationError):
        await service.apply_partial_update(ticket.id, {})
    with pytest.raises(ValidationError):
        await service.apply_partial_update(ticket.id, {"quantity": None, "unrelated": 5})

    stored = await service.get_ticket(ticket.id)
    assert stored.quantity == Decimal("4.00")
    assert stored.total_bill == Decimal("400.00")


async def test_oversized_rate_rejected_and_ticket_untouched(db, make_customer, make_driver, submit_ticket):
    await make_customer("Acme", "100.00")
    driver = await make_driver()
    ticket = await submit_ticket(driver.id, "Acme", "4")
    service = TicketService(db)

    with pytest.raises(ValidationError):
        await service.apply_partial_update(ticket.id, {"bill_rate": Decimal("1e30")})

    stored = await service.get_ticket(ticket.id)
    assert stored.bill_rate == Decimal("100.00")
    assert stored.total_bill == Decimal("400.00")


def test_update_schema_bounds_amounts():
    with pytest.raises(PydanticValidationError):
        TicketUpdate(quantity=Decimal("100000000"))
    assert TicketUpdate(quantity=Decimal("99999999.99")).quantity == Decimal("99999999.99")


async def test_invalid_status_rejected(db, make_driver, submit_ticket):
    driver = await make_driver()
    ticket = await submit_ticket(driver.id, "Acme", "1")
    with pytest.raises(ValidationError):
        await TicketService(db).apply_partial_update(ticket.id, {"status": "Done"})
    stored = await TicketService(db).get_ticket(ticket.id)
    assert stored.status == "Pending"


async def test_update_unknown_ticket(db):
    with pytest.raises(NotFoundError):
        await TicketService(db).apply_partial_update("missing", {"quantity": 1})


async def test_random_partial_updates_keep_totals_consistent(db, make_customer, make_driver, submit_ticket):
    await make_customer("Acme", "95.25")
    driver = await make_driver(pay_rate="31.40")
    ticket = await submit_ticket(driver.id, "Acme", "7.75")
    service = TicketService(db)
    rng = random.Random(20251101)

    expected = {
        "quantity": Decimal("7.75"),
        "bill_rate": Decimal("95.25"),
        "pay_rate": Decimal("31.40"),
        "status": "Pending",
    }
    for _ in range(25):
        fields = [f for f in expected if rng.random() < 0.5] or ["quantity"]
        patch = {}
        for field in fields:
            if field == "status":
                patch[field] = rng.choice(["Pending", "Approved", "Rejected"])
            else:
                patch[field] = Decimal(rng.randint(0, 50000)) / 100
        expected.update(patch)

        ticket = await service.apply_partial_update(ticket.id, patch)

        assert ticket.quantity == expected["quantity"]
        assert ticket.bill_rate == expected["bill_rate"]
        assert ticket.pay_rate == expected["pay_rate"]
        assert ticket.status == expected["status"]
        assert ticket.total_bill == expected["quantity"] * expected["bill_rate"]
        assert ticket.total_pay == expected["quantity"] * expected["pay_rate"]


async def test_driver_can_only_read_own_ticket(db, make_driver, submit_ticket):
    first = await make_driver(code="D1", name="First")
    second = await make_driver(code="D2", name="Second")
    ticket = await submit_ticket(first.id, "Acme", "1")
    service = TicketService(db)

    assert (await service.get_driver_ticket(first.id, ticket.id)).id == ticket.id
    with pytest.raises(NotFoundError):
        await service.get_driver_ticket(second.id, ticket.id)


async def test_list_driver_tickets_newest_first(db, make_driver, submit_ticket):
    driver = await make_driver()
    await submit_ticket(driver.id, "Acme", "1", ticket_date=date(2025, 11, 1), ticket_number="A")
    await submit_ticket(driver.id, "Acme", "1", ticket_date=date(2025, 11, 5), ticket_number="B")

    tickets = await TicketService(db).list_driver_tickets(driver.id)
    assert [t.ticket_number for t in tickets] == ["B", "A"]
