from datetime import date

import pytest

from truckticket.core.exceptions import NotFoundError
from truckticket.services.ticket_query import (
    TicketFilter,
    TicketQueryService,
    compile_ticket_filter,
    month_bounds,
    parse_period,
)


@pytest.mark.parametrize(
    "token, expected",
    [
        ("2025-11", (2025, 11)),
        ("November 2025", (2025, 11)),
        ("november 2025", (2025, 11)),
        ("Nov 2025", (2025, 11)),
        ("  DEC 2024 ", (2024, 12)),
        ("2025-13", None),
        ("Smarch 2025", None),
        ("November", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_period(token, expected):
    assert parse_period(token) == expected


def test_month_bounds_rolls_over_year():
    assert month_bounds(2025, 12) == (date(2025, 12, 1), date(2026, 1, 1))
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 3, 1))


def test_blank_and_sentinel_values_add_no_clauses():
    criteria = TicketFilter(period="  ", customer="All", driver="All", status="", search=None)
    assert compile_ticket_filter(criteria) == []


def test_bad_period_is_dropped():
    assert compile_ticket_filter(TicketFilter(period="not a month")) == []
    assert len(compile_ticket_filter(TicketFilter(period="2025-11"))) == 2


@pytest.fixture
async def board(db, make_customer, make_driver, submit_ticket, approve):
    await make_customer("Acme", "100.00")
    await make_customer("Beta", "80.00")
    sam = await make_driver(code="D1", name="Sam")
    ann = await make_driver(code="D2", name="Ann")

    t1 = await submit_ticket(sam.id, "Acme", "1", ticket_date=date(2025, 10, 31), ticket_number="OCT-9")
    t2 = await submit_ticket(sam.id, "Acme", "2", ticket_date=date(2025, 11, 1), ticket_number="NOV-1")
    t3 = await submit_ticket(ann.id, "Beta", "3", ticket_date=date(2025, 11, 30), ticket_number="nov-2")
    t4 = await submit_ticket(ann.id, "Ghost Co", "4", ticket_date=date(2025, 12, 1), ticket_number="DEC-1")
    await approve(t2.id)
    return {"sam": sam, "ann": ann, "tickets": [t1, t2, t3, t4]}


async def test_list_all_newest_first(db, board):
    items = await TicketQueryService(db).list_tickets()
    assert [i.ticket_number for i in items] == ["DEC-1", "nov-2", "NOV-1", "OCT-9"]


async def test_period_filter_is_half_open_month(db, board):
    items = await TicketQueryService(db).list_tickets(TicketFilter(period="November 2025"))
    assert [i.ticket_number for i in items] == ["nov-2", "NOV-1"]


async def test_unparseable_period_returns_everything(db, board):
    items = await TicketQueryService(db).list_tickets(TicketFilter(period="whenever"))
    assert len(items) == 4


async def test_filters_combine(db, board):
    service = TicketQueryService(db)
    items = await service.list_tickets(TicketFilter(period="2025-11", driver="Sam", status="Approved"))
    assert [i.ticket_number for i in items] == ["NOV-1"]

    items = await service.list_tickets(TicketFilter(customer=" Beta "))
    assert [i.ticket_number for i in items] == ["nov-2"]


async def test_search_is_case_insensitive_substring(db, board):
    items = await TicketQueryService(db).list_tickets(TicketFilter(search="NOV"))
    assert sorted(i.ticket_number for i in items) == ["NOV-1", "nov-2"]


async def test_search_treats_wildcards_literally(db, board):
    items = await TicketQueryService(db).list_tickets(TicketFilter(search="%"))
    assert items == []


async def test_rows_carry_driver_and_customer_names(db, board):
    items = await TicketQueryService(db).list_tickets()
    by_number = {i.ticket_number: i for i in items}
    assert by_number["NOV-1"].driver_name == "Sam"
    assert by_number["NOV-1"].driver_code == "D1"
    assert by_number["NOV-1"].customer_name == "Acme"
    assert by_number["DEC-1"].customer_name is None


async def test_ticket_detail(db, board):
    service = TicketQueryService(db)
    ticket = board["tickets"][2]
    detail = await service.get_ticket_detail(ticket.id)
    assert detail.driver_name == "Ann"
    with pytest.raises(NotFoundError):
        await service.get_ticket_detail("missing")
