import typing as t
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.contrib.auth.models import AnonymousUser
from django.core import mail
from django.db import DatabaseError

from accounts.models import TicketingUser
from events.exceptions import (
    CapacityExceeded,
    EventUnavailable,
    InvalidQuantity,
    StorageFailure,
    UnknownTicketType,
)
from events.models import Event, Ticket
from events.schema import CustomerInfoSchema, PurchaseGroupSchema, PurchaseLineSchema
from events.service.purchase_service import (
    GuestPurchaser,
    PurchaseService,
    RegisteredPurchaser,
    resolve_purchaser,
)

from .conftest import Buy, EventFactory

pytestmark = pytest.mark.django_db


def _group(event_id: str, *lines: tuple[str, int]) -> PurchaseGroupSchema:
    return PurchaseGroupSchema(
        event_id=event_id,
        lines=[PurchaseLineSchema(ticket_type=label, quantity=quantity) for label, quantity in lines],
    )


class TestResolvePurchaser:
    def test_anonymous_is_guest(self, customer: CustomerInfoSchema) -> None:
        purchaser = resolve_purchaser(AnonymousUser(), customer)

        assert isinstance(purchaser, GuestPurchaser)
        assert purchaser.user is None
        assert purchaser.contact.email == "alex@example.com"

    def test_authenticated_user_is_registered(self, customer: CustomerInfoSchema, user: TicketingUser) -> None:
        purchaser = resolve_purchaser(user, customer)

        assert isinstance(purchaser, RegisteredPurchaser)
        assert purchaser.user == user


class TestCheckout:
    def test_one_ledger_row_per_unit(self, event: Event, buy: Buy) -> None:
        result = buy(event, quantity=3)

        event.refresh_from_db()
        assert len(result.tickets) == 3
        assert len({ticket.id for ticket in result.tickets}) == 3
        assert event.tickets_sold == 3
        assert Ticket.objects.filter(event=event, status=Ticket.TicketStatus.ACTIVE).count() == 3
        assert result.total_price == Decimal("75.00")

    def test_guest_purchase_keeps_contact_and_no_user(self, event: Event, buy: Buy) -> None:
        ticket = buy(event).tickets[0]
        ticket.refresh_from_db()

        assert ticket.user is None
        assert ticket.customer_first_name == "Alex"
        assert ticket.customer_last_name == "Buyer"
        assert ticket.customer_email == "alex@example.com"
        assert ticket.customer_phone == "555-0100"

    def test_registered_purchase_links_user(self, event: Event, buy: Buy, user: TicketingUser) -> None:
        ticket = buy(event, user=user).tickets[0]
        ticket.refresh_from_db()

        assert ticket.user == user
        assert ticket.customer_email == "alex@example.com"

    def test_price_is_captured_at_purchase(self, event: Event, buy: Buy) -> None:
        ticket = buy(event).tickets[0]
        event.ticket_types.filter(label="GA").update(price=Decimal("99.00"))

        ticket.refresh_from_db()
        assert ticket.price == Decimal("25.00")

    def test_groups_for_the_same_event_are_summed(
        self, event_factory: EventFactory, customer: CustomerInfoSchema
    ) -> None:
        event = event_factory(ticket_count=3, ticket_types=[("GA", Decimal("10")), ("VIP", Decimal("50"))])
        service = PurchaseService(resolve_purchaser(None, customer))

        with pytest.raises(CapacityExceeded) as exc_info:
            service.checkout([_group(str(event.id), ("GA", 2)), _group(str(event.id), ("VIP", 2))])

        assert exc_info.value.remaining == 3
        event.refresh_from_db()
        assert event.tickets_sold == 0
        assert not Ticket.objects.filter(event=event).exists()

    def test_multi_event_cart(
        self, event: Event, other_event: Event, customer: CustomerInfoSchema
    ) -> None:
        service = PurchaseService(resolve_purchaser(None, customer))

        result = service.checkout([_group(str(event.id), ("GA", 2)), _group(str(other_event.id), ("GA", 1))])

        event.refresh_from_db()
        other_event.refresh_from_db()
        assert event.tickets_sold == 2
        assert other_event.tickets_sold == 1
        assert result.total_price == Decimal("90.00")


class TestCheckoutValidation:
    def test_unknown_event(self, customer: CustomerInfoSchema) -> None:
        service = PurchaseService(resolve_purchaser(None, customer))

        with pytest.raises(EventUnavailable):
            service.checkout([_group(str(uuid4()), ("GA", 1))])

    def test_malformed_event_id_is_unavailable(self, customer: CustomerInfoSchema) -> None:
        service = PurchaseService(resolve_purchaser(None, customer))

        with pytest.raises(EventUnavailable):
            service.checkout([_group("not-an-id", ("GA", 1))])

    @pytest.mark.parametrize("status", [Event.EventStatus.PENDING, Event.EventStatus.DENIED])
    def test_event_not_approved(self, event_factory: EventFactory, buy: Buy, status: Event.EventStatus) -> None:
        event = event_factory(status=status)

        with pytest.raises(EventUnavailable):
            buy(event)

    def test_unknown_ticket_type(self, event: Event, buy: Buy) -> None:
        with pytest.raises(UnknownTicketType):
            buy(event, label="Backstage")

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_invalid_quantity(self, event: Event, buy: Buy, quantity: int) -> None:
        with pytest.raises(InvalidQuantity):
            buy(event, quantity=quantity)

    def test_failure_in_second_group_rolls_back_the_first(
        self, event: Event, other_event: Event, customer: CustomerInfoSchema
    ) -> None:
        service = PurchaseService(resolve_purchaser(None, customer))

        with pytest.raises(UnknownTicketType):
            service.checkout([_group(str(event.id), ("GA", 2)), _group(str(other_event.id), ("Nope", 1))])

        event.refresh_from_db()
        assert event.tickets_sold == 0
        assert not Ticket.objects.exists()


class TestCapacity:
    def test_serial_purchases_stop_at_capacity(self, event_factory: EventFactory, buy: Buy) -> None:
        event = event_factory(ticket_count=5)

        for _ in range(5):
            buy(event)
        with pytest.raises(CapacityExceeded):
            buy(event)

        event.refresh_from_db()
        assert event.tickets_sold == 5
        assert Ticket.objects.active().filter(event=event).count() == 5

    def test_sold_out_reports_zero_remaining(self, event_factory: EventFactory, buy: Buy) -> None:
        event = event_factory(ticket_count=2)

        buy(event, quantity=2)
        event.refresh_from_db()
        assert event.tickets_sold == 2

        with pytest.raises(CapacityExceeded) as exc_info:
            buy(event, quantity=1)

        assert exc_info.value.remaining == 0
        assert "remaining: 0" in exc_info.value.detail

    def test_request_larger_than_capacity(self, event_factory: EventFactory, buy: Buy) -> None:
        event = event_factory(ticket_count=3)

        with pytest.raises(CapacityExceeded) as exc_info:
            buy(event, quantity=4)

        assert exc_info.value.extra["requested"] == 4
        assert not Ticket.objects.filter(event=event).exists()

    def test_refunded_seats_can_be_sold_again(
        self, event_factory: EventFactory, buy: Buy, admin_user: TicketingUser
    ) -> None:
        from events.service import refund_service

        event = event_factory(ticket_count=1)
        first = buy(event).tickets[0]
        refund_service.refund_ticket(first.id, admin_user)

        buy(event)

        event.refresh_from_db()
        assert event.tickets_sold == 1


class TestStorageFailure:
    def test_database_error_becomes_storage_failure(self, event: Event, buy: Buy) -> None:
        with patch.object(Ticket.objects, "bulk_create", side_effect=DatabaseError("disk full")):
            with pytest.raises(StorageFailure):
                buy(event, quantity=2)

        event.refresh_from_db()
        assert event.tickets_sold == 0


class TestConfirmationEmail:
    def test_sent_after_commit_with_one_qr_code_per_ticket(
        self, event: Event, buy: Buy, django_capture_on_commit_callbacks: t.Any
    ) -> None:
        with django_capture_on_commit_callbacks(execute=True):
            result = buy(event, quantity=2)

        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.subject == "Your Purchase Confirmation from Click eTickets"
        html = message.alternatives[0][0]
        assert html.count("data:image/png;base64,") == 2
        for ticket in result.tickets:
            assert str(ticket.id) in message.body
        assert "mytickets.html" not in message.body

    def test_registered_buyer_gets_my_tickets_link(
        self, event: Event, buy: Buy, user: TicketingUser, django_capture_on_commit_callbacks: t.Any
    ) -> None:
        with django_capture_on_commit_callbacks(execute=True):
            buy(event, user=user)

        assert "mytickets.html" in mail.outbox[0].body

    def test_not_sent_when_checkout_fails(
        self, event: Event, buy: Buy, django_capture_on_commit_callbacks: t.Any
    ) -> None:
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(UnknownTicketType):
                buy(event, label="Nope")

        assert callbacks == []
        assert mail.outbox == []

    def test_dispatch_failure_does_not_undo_purchase(
        self, event: Event, buy: Buy, django_capture_on_commit_callbacks: t.Any
    ) -> None:
        with patch(
            "events.service.notification_service.send_purchase_confirmation.delay",
            side_effect=ConnectionError("broker down"),
        ):
            with django_capture_on_commit_callbacks(execute=True):
                result = buy(event)

        assert Ticket.objects.filter(pk=result.tickets[0].pk, status=Ticket.TicketStatus.ACTIVE).exists()
        event.refresh_from_db()
        assert event.tickets_sold == 1
