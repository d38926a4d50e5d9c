import datetime
from uuid import uuid4

import pytest
from django.core import mail
from django.utils import timezone

from accounts.models import TicketingUser
from common.models import EmailLog
from events.exceptions import MalformedId, TicketNotFound, TicketRefunded
from events.models import Event, Ticket
from events.schema import CustomerInfoSchema, PurchaseGroupSchema, PurchaseLineSchema
from events.service import notification_service, refund_service, sales_service
from events.service.purchase_service import PurchaseService, resolve_purchaser

from .conftest import Buy, EventFactory

pytestmark = pytest.mark.django_db


def _buy_as(event: Event, first_name: str, email: str) -> Ticket:
    customer = CustomerInfoSchema(first_name=first_name, last_name="Guest", email=email, phone="555-0111")
    group = PurchaseGroupSchema(event_id=str(event.id), lines=[PurchaseLineSchema(ticket_type="GA", quantity=1)])
    return PurchaseService(resolve_purchaser(None, customer)).checkout([group]).tickets[0]


class TestSalesWindow:
    def test_recent_and_upcoming_events_only(self, event_factory: EventFactory) -> None:
        today = timezone.localdate()
        upcoming = event_factory(name="Upcoming", date=today + datetime.timedelta(days=3))
        yesterday = event_factory(name="Yesterday", date=today - datetime.timedelta(days=1))
        old = event_factory(name="Old", date=today - datetime.timedelta(days=3))
        for e in (upcoming, yesterday, old):
            _buy_as(e, "Kim", "kim@example.com")

        names = {ticket.event.name for ticket in sales_service.list_sales()}

        assert names == {"Upcoming", "Yesterday"}

    def test_newest_purchase_first(self, event: Event) -> None:
        first = _buy_as(event, "Kim", "kim@example.com")
        second = _buy_as(event, "Lou", "lou@example.com")

        assert list(sales_service.list_sales()) == [second, first]

    def test_event_outside_window_yields_nothing(self, event_factory: EventFactory) -> None:
        old = event_factory(date=timezone.localdate() - datetime.timedelta(days=10))
        _buy_as(old, "Kim", "kim@example.com")

        assert list(sales_service.list_sales(event_id=str(old.id))) == []

    def test_filter_by_event(self, event: Event, other_event: Event) -> None:
        ours = _buy_as(event, "Kim", "kim@example.com")
        _buy_as(other_event, "Lou", "lou@example.com")

        assert list(sales_service.list_sales(event_id=str(event.id))) == [ours]

    def test_malformed_event_filter(self) -> None:
        with pytest.raises(MalformedId):
            sales_service.list_sales(event_id="nope")


class TestSalesSearch:
    @pytest.fixture
    def tickets(self, event: Event) -> tuple[Ticket, Ticket]:
        return _buy_as(event, "Kim", "kim@example.com"), _buy_as(event, "Lou", "lou@sample.org")

    def test_by_name(self, tickets: tuple[Ticket, Ticket]) -> None:
        assert list(sales_service.list_sales(search="kim")) == [tickets[0]]

    def test_by_email(self, tickets: tuple[Ticket, Ticket]) -> None:
        assert list(sales_service.list_sales(search="sample.org")) == [tickets[1]]

    def test_by_ticket_id(self, tickets: tuple[Ticket, Ticket]) -> None:
        assert list(sales_service.list_sales(search=str(tickets[1].id))) == [tickets[1]]

    def test_blank_search_matches_everything(self, tickets: tuple[Ticket, Ticket]) -> None:
        assert sales_service.list_sales(search="   ").count() == 2


class TestResend:
    def test_resends_single_ticket(self, ticket: Ticket, admin_user: TicketingUser) -> None:
        result = notification_service.request_ticket_resend(str(ticket.id), admin_user)

        assert result == ticket
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.subject == "Your Ticket for Summer Night (Resent)"
        assert str(ticket.id) in message.body
        assert message.alternatives[0][0].count("data:image/png;base64,") == 1
        assert EmailLog.objects.filter(subject=message.subject).count() == 1

    def test_refunded_ticket_is_not_resent(self, ticket: Ticket, admin_user: TicketingUser) -> None:
        refund_service.refund_ticket(ticket.id, admin_user)

        with pytest.raises(TicketRefunded):
            notification_service.request_ticket_resend(ticket.id, admin_user)

        assert mail.outbox == []

    def test_unknown_ticket(self, admin_user: TicketingUser) -> None:
        with pytest.raises(TicketNotFound):
            notification_service.request_ticket_resend(uuid4(), admin_user)

    def test_emails_are_rerouted_unless_live(self, ticket: Ticket, admin_user: TicketingUser) -> None:
        notification_service.request_ticket_resend(ticket.id, admin_user)

        assert mail.outbox[0].bcc == ["internal+alex_at_example_dot_com@example.com"]


class TestPurchaseConfirmationTask:
    def test_missing_tickets_send_nothing(self) -> None:
        notification_service.dispatch_purchase_confirmation("alex@example.com", [uuid4()])

        assert mail.outbox == []

    def test_guest_confirmation_lists_every_ticket(self, event: Event, buy: Buy) -> None:
        result = buy(event, quantity=2)

        notification_service.dispatch_purchase_confirmation("alex@example.com", [t.id for t in result.tickets])

        body = mail.outbox[0].body
        assert body.count("Ticket ID:") == 2
        assert "50.00" in body
