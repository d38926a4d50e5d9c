"""Checkout of a multi-event cart.

A whole cart is one transaction: every event it touches is locked in id order, every
line is validated, and only then are the ledger rows written and the sold counters
incremented. Either all tickets are issued or none are.
"""

import typing as t
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from functools import partial
from uuid import UUID

import structlog
from django.db import transaction

from accounts.models import TicketingUser
from events.exceptions import (
    CapacityExceeded,
    EventUnavailable,
    InvalidQuantity,
    MalformedId,
    UnknownTicketType,
)
from events.models import Event, Ticket, TicketType
from events.schema import CustomerInfoSchema, PurchaseGroupSchema
from events.service import catalog_service, notification_service, storage_guard
from events.utils import parse_uuid

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CustomerContact:
    first_name: str
    last_name: str
    email: str
    phone: str

    @classmethod
    def from_schema(cls, customer: CustomerInfoSchema) -> "CustomerContact":
        return cls(
            first_name=customer.first_name,
            last_name=customer.last_name,
            email=str(customer.email).lower(),
            phone=customer.phone,
        )


@dataclass(frozen=True)
class GuestPurchaser:
    contact: CustomerContact

    @property
    def user(self) -> None:
        return None


@dataclass(frozen=True)
class RegisteredPurchaser:
    user: TicketingUser
    contact: CustomerContact


Purchaser = GuestPurchaser | RegisteredPurchaser


def resolve_purchaser(user: t.Any, customer: CustomerInfoSchema) -> Purchaser:
    """Decide once whether the cart is bought by a guest or by an account holder."""
    contact = CustomerContact.from_schema(customer)
    if isinstance(user, TicketingUser) and user.is_authenticated:
        return RegisteredPurchaser(user=user, contact=contact)
    return GuestPurchaser(contact=contact)


@dataclass(frozen=True)
class PurchaseResult:
    tickets: list[Ticket]
    total_price: Decimal


@dataclass
class _EventOrder:
    """The validated lines of one event, merged across the cart's groups."""

    event: Event
    lines: list[tuple[TicketType, int]]

    @property
    def quantity(self) -> int:
        return sum(quantity for _, quantity in self.lines)


class PurchaseService:
    """Issues tickets for a cart on behalf of one purchaser."""

    def __init__(self, purchaser: Purchaser) -> None:
        self.purchaser = purchaser

    def checkout(self, groups: t.Sequence[PurchaseGroupSchema]) -> PurchaseResult:
        """Validate the cart and issue one ticket per unit.

        Args:
            groups: Purchase groups, each naming an event and its ticket type lines. Several
                groups may reference the same event; their quantities are summed.

        Returns:
            The issued tickets, in cart order, and their total price.

        Raises:
            EventUnavailable: An event is missing or not approved.
            UnknownTicketType: A label is not on the event's price list.
            InvalidQuantity: A quantity is not a positive whole number.
            CapacityExceeded: An event cannot cover the requested total.
            StorageFailure: The database failed; nothing was written.
        """
        event_ids = self._requested_event_ids(groups)
        with storage_guard("checkout", event_ids=[str(pk) for pk in event_ids]):
            with transaction.atomic():
                orders = self._validate(groups, self._lock_events(event_ids))
                tickets = self._issue(orders)
                transaction.on_commit(
                    partial(
                        notification_service.dispatch_purchase_confirmation,
                        self.purchaser.contact.email,
                        [ticket.pk for ticket in tickets],
                    ),
                    robust=True,
                )

        total_price = sum((ticket.price for ticket in tickets), Decimal("0.00"))
        logger.info(
            "tickets_purchased",
            purchaser="registered" if isinstance(self.purchaser, RegisteredPurchaser) else "guest",
            user_id=str(self.purchaser.user.id) if self.purchaser.user else None,
            event_ids=[str(pk) for pk in event_ids],
            ticket_count=len(tickets),
            total_price=str(total_price),
        )
        return PurchaseResult(tickets=tickets, total_price=total_price)

    @staticmethod
    def _requested_event_ids(groups: t.Sequence[PurchaseGroupSchema]) -> list[UUID]:
        event_ids: list[UUID] = []
        for group in groups:
            try:
                event_id = parse_uuid(group.event_id, "event_id")
            except MalformedId:
                raise EventUnavailable(group.event_id) from None
            if event_id not in event_ids:
                event_ids.append(event_id)
        return event_ids

    @staticmethod
    def _lock_events(event_ids: list[UUID]) -> dict[UUID, tuple[Event, dict[str, TicketType]]]:
        """Lock the cart's events in ascending id order so concurrent carts cannot deadlock.

        Returns:
            Each locked event with its price list keyed by label.
        """
        locked = Event.objects.select_for_update().filter(pk__in=event_ids).order_by("pk")
        events: dict[UUID, tuple[Event, dict[str, TicketType]]] = {event.pk: (event, {}) for event in locked}
        for ticket_type in TicketType.objects.filter(event_id__in=events.keys()):
            events[ticket_type.event_id][1][ticket_type.label] = ticket_type
        return events

    @staticmethod
    def _validate(
        groups: t.Sequence[PurchaseGroupSchema], events: dict[UUID, tuple[Event, dict[str, TicketType]]]
    ) -> list[_EventOrder]:
        orders: dict[UUID, _EventOrder] = {}
        for group in groups:
            event_id = parse_uuid(group.event_id, "event_id")
            event, price_list = events.get(event_id, (None, {}))
            if event is None or event.status != Event.EventStatus.APPROVED:
                raise EventUnavailable(event_id)
            order = orders.setdefault(event_id, _EventOrder(event=event, lines=[]))
            for line in group.lines:
                ticket_type = price_list.get(line.ticket_type)
                if ticket_type is None:
                    raise UnknownTicketType(event_id, line.ticket_type)
                quantity = line.quantity
                if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                    raise InvalidQuantity(line.ticket_type, quantity)
                order.lines.append((ticket_type, quantity))

        for order in orders.values():
            requested = order.quantity
            if order.event.tickets_sold + requested > order.event.ticket_count:
                raise CapacityExceeded(order.event.pk, order.event.name, requested, order.event.remaining_capacity)
        return list(orders.values())

    def _issue(self, orders: list[_EventOrder]) -> list[Ticket]:
        contact = self.purchaser.contact
        tickets: list[Ticket] = []
        for order in orders:
            for ticket_type, quantity in order.lines:
                for _ in range(quantity):
                    ticket = Ticket(
                        event=order.event,
                        user=self.purchaser.user,
                        ticket_type=ticket_type.label,
                        price=ticket_type.price,
                        customer_first_name=contact.first_name,
                        customer_last_name=contact.last_name,
                        customer_email=contact.email,
                        customer_phone=contact.phone,
                    )
                    # the event and user were loaded in this transaction
                    ticket.clean_fields(exclude=["event", "user", "checked_in_by"])
                    ticket.clean()
                    tickets.append(ticket)
        tickets = Ticket.objects.bulk_create(tickets)
        for order in orders:
            catalog_service.update_tickets_sold(order.event.pk, delta=order.quantity)
        return tickets
