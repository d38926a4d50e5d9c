"""Refunds release capacity back to the event.

Both operations lock the event row before its tickets, the same order the checkout
uses, so refunds and purchases of one event serialize on the event row.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from accounts.models import TicketingUser
from events.exceptions import AlreadyRefunded, EventNotFound, NothingToRefund, TicketNotFound
from events.models import Event, Ticket
from events.service import catalog_service, storage_guard
from events.utils import parse_uuid, refund_amount

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RefundResult:
    ticket: Ticket
    amount: Decimal


@dataclass(frozen=True)
class BulkRefundResult:
    event: Event
    refunded_count: int
    total_amount: Decimal


def refund_ticket(ticket_id: UUID | str, staff: TicketingUser) -> RefundResult:
    """Refund one ticket and give its seat back.

    Checked-in tickets can be refunded as well. No money moves; the amount is what
    the customer is owed once the service fee is taken off.

    Raises:
        MalformedId: The id is not a UUID.
        TicketNotFound: No ticket has this id.
        AlreadyRefunded: The ticket was refunded before.
        StorageFailure: The database failed; nothing was written.
    """
    ticket_uuid = parse_uuid(ticket_id, "ticket_id")
    with storage_guard("refund_ticket", ticket_id=str(ticket_uuid)):
        with transaction.atomic():
            event_id = Ticket.objects.filter(pk=ticket_uuid).values_list("event_id", flat=True).first()
            if event_id is None:
                raise TicketNotFound(ticket_uuid)
            Event.objects.select_for_update().filter(pk=event_id).first()
            ticket = Ticket.objects.select_for_update().filter(pk=ticket_uuid).first()
            if ticket is None:
                raise TicketNotFound(ticket_uuid)
            if ticket.status == Ticket.TicketStatus.REFUNDED:
                raise AlreadyRefunded(ticket_uuid)

            now = timezone.now()
            Ticket.objects.filter(pk=ticket_uuid).update(
                status=Ticket.TicketStatus.REFUNDED, refunded_at=now, updated_at=now
            )
            catalog_service.update_tickets_sold(event_id, delta=-1)

    amount = refund_amount(ticket.price)
    logger.info(
        "ticket_refunded",
        ticket_id=str(ticket_uuid),
        event_id=str(event_id),
        refund_amount=str(amount),
        staff_id=str(staff.id),
    )
    return RefundResult(ticket=Ticket.objects.full().get(pk=ticket_uuid), amount=amount)


def refund_event(event_id: UUID | str, staff: TicketingUser) -> BulkRefundResult:
    """Refund every active ticket of an event and reset its sold counter.

    Tickets refunded earlier are left as they are.

    Raises:
        MalformedId: The id is not a UUID.
        EventNotFound: No event has this id.
        NothingToRefund: The event has no active tickets.
        StorageFailure: The database failed; nothing was written.
    """
    event_uuid = parse_uuid(event_id, "event_id")
    with storage_guard("refund_event", event_id=str(event_uuid)):
        with transaction.atomic():
            event = Event.objects.select_for_update().filter(pk=event_uuid).first()
            if event is None:
                raise EventNotFound(event_uuid)
            tickets = list(Ticket.objects.select_for_update().active().filter(event=event).order_by("pk"))
            if not tickets:
                raise NothingToRefund(event_uuid)

            now = timezone.now()
            Ticket.objects.filter(pk__in=[ticket.pk for ticket in tickets]).update(
                status=Ticket.TicketStatus.REFUNDED, refunded_at=now, updated_at=now
            )
            catalog_service.update_tickets_sold(event.pk, absolute=0)

    total = sum((refund_amount(ticket.price) for ticket in tickets), Decimal("0.00"))
    event.refresh_from_db()
    logger.info(
        "event_refunded",
        event_id=str(event_uuid),
        refunded_count=len(tickets),
        refund_amount=str(total),
        staff_id=str(staff.id),
    )
    return BulkRefundResult(event=event, refunded_count=len(tickets), total_amount=total)
