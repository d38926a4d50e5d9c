import datetime
import typing as t
from decimal import Decimal

import pytest
from django.utils import timezone

from accounts.models import TicketingUser
from events.models import Event, Ticket, TicketType
from events.schema import CustomerInfoSchema, PurchaseGroupSchema, PurchaseLineSchema
from events.service.purchase_service import PurchaseResult, PurchaseService, resolve_purchaser


class EventFactory:
    def __call__(self, **kwargs: t.Any) -> Event:
        ticket_types: list[tuple[str, Decimal]] = kwargs.pop("ticket_types", [("GA", Decimal("25.00"))])
        defaults: dict[str, t.Any] = {
            "name": "Summer Night",
            "description": "Live music on the rooftop.",
            "date": timezone.localdate() + datetime.timedelta(days=7),
            "time": datetime.time(19, 30),
            "location": "Rooftop Bar",
            "status": Event.EventStatus.APPROVED,
            "promoter_first_name": "Pat",
            "promoter_last_name": "Doe",
            "ticket_count": 10,
        }
        defaults.update(kwargs)
        event = Event.objects.create(**defaults)
        for position, (label, price) in enumerate(ticket_types):
            TicketType.objects.create(event=event, label=label, price=price, display_order=position)
        return event


@pytest.fixture
def event_factory() -> EventFactory:
    return EventFactory()


@pytest.fixture
def event(event_factory: EventFactory) -> Event:
    """An approved event with 10 seats and a single GA ticket type at 25.00."""
    return event_factory()


@pytest.fixture
def other_event(event_factory: EventFactory) -> Event:
    return event_factory(name="Winter Gala", ticket_types=[("GA", Decimal("40.00"))])


@pytest.fixture
def customer() -> CustomerInfoSchema:
    return CustomerInfoSchema(first_name="Alex", last_name="Buyer", email="alex@example.com", phone="555-0100")


class Buy(t.Protocol):
    def __call__(
        self, event: Event, quantity: int = ..., label: str = ..., user: TicketingUser | None = ...
    ) -> PurchaseResult: ...


@pytest.fixture
def buy(customer: CustomerInfoSchema) -> Buy:
    """Check out ``quantity`` tickets of one type through the purchase engine."""

    def _buy(event: Event, quantity: int = 1, label: str = "GA", user: TicketingUser | None = None) -> PurchaseResult:
        group = PurchaseGroupSchema(
            event_id=str(event.id),
            lines=[PurchaseLineSchema(ticket_type=label, quantity=quantity)],
        )
        return PurchaseService(resolve_purchaser(user, customer)).checkout([group])

    return _buy


@pytest.fixture
def ticket(event: Event, buy: Buy) -> Ticket:
    """One active ticket of ``event``."""
    return buy(event).tickets[0]
