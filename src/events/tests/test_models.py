import datetime
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from events.exceptions import MalformedId
from events.models import Event, Ticket
from events.utils import format_time_12h, parse_uuid, qr_code_png, refund_amount

from .conftest import EventFactory

pytestmark = pytest.mark.django_db


class TestEvent:
    def test_remaining_capacity(self, event: Event) -> None:
        event.tickets_sold = 4

        assert event.remaining_capacity == 6

    def test_sold_above_capacity_is_invalid(self, event: Event) -> None:
        event.tickets_sold = 11

        with pytest.raises(ValidationError):
            event.save()

    @pytest.mark.parametrize(
        "status,target,allowed",
        [
            (Event.EventStatus.PENDING, Event.EventStatus.APPROVED, True),
            (Event.EventStatus.PENDING, Event.EventStatus.DENIED, True),
            (Event.EventStatus.PENDING, Event.EventStatus.PENDING, False),
            (Event.EventStatus.APPROVED, Event.EventStatus.DENIED, False),
            (Event.EventStatus.DENIED, Event.EventStatus.APPROVED, False),
        ],
    )
    def test_status_transitions(self, status: str, target: str, allowed: bool) -> None:
        assert Event(status=status).can_transition_to(target) is allowed


class TestTicket:
    def test_event_and_price_are_frozen(self, ticket: Ticket, event_factory: EventFactory) -> None:
        ticket = Ticket.objects.get(pk=ticket.pk)
        ticket.price = Decimal("1.00")
        ticket.event = event_factory(name="Elsewhere")

        with pytest.raises(ValidationError) as exc_info:
            ticket.save()

        assert set(exc_info.value.message_dict) == {"event", "price"}

    def test_check_in_fields_must_agree(self, ticket: Ticket) -> None:
        ticket = Ticket.objects.get(pk=ticket.pk)
        ticket.is_checked_in = True

        with pytest.raises(ValidationError):
            ticket.save()

    def test_customer_name(self, ticket: Ticket) -> None:
        assert ticket.customer_name == "Alex Buyer"


@pytest.mark.parametrize(
    "value,expected",
    [
        (datetime.time(0, 5), "12:05 AM"),
        (datetime.time(9, 0), "9:00 AM"),
        (datetime.time(12, 0), "12:00 PM"),
        (datetime.time(19, 30), "7:30 PM"),
        (None, ""),
    ],
)
def test_format_time_12h(value: datetime.time | None, expected: str) -> None:
    assert format_time_12h(value) == expected


@pytest.mark.parametrize(
    "price,expected",
    [
        (Decimal("25.00"), Decimal("23.81")),
        (Decimal("105.00"), Decimal("100.00")),
        (Decimal("0.00"), Decimal("0.00")),
        (Decimal("10.50"), Decimal("10.00")),
    ],
)
def test_refund_amount_reverses_service_fee(price: Decimal, expected: Decimal) -> None:
    assert refund_amount(price, Decimal("0.05")) == expected


def test_parse_uuid_rejects_garbage() -> None:
    with pytest.raises(MalformedId) as exc_info:
        parse_uuid("12-34", "ticket_id")

    assert exc_info.value.to_dict()["field"] == "ticket_id"


def test_qr_code_is_a_png() -> None:
    assert qr_code_png("b0f1c5e2-4d1a-4b8e-9a57-0c3c9d3f0a11").startswith(b"\x89PNG")
