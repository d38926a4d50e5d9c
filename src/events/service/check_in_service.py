"""Door check-in: every ticket is admitted at most once."""

from uuid import UUID

import structlog
from django.db.models import Count, Q
from django.utils import timezone

from accounts.models import TicketingUser
from events.exceptions import AlreadyRedeemed, EventMismatch, TicketNotFound, TicketRefunded
from events.models import Event, Ticket
from events.service import catalog_service, storage_guard
from events.utils import parse_uuid

logger = structlog.get_logger(__name__)


def _load_ticket(ticket_id: UUID) -> Ticket:
    try:
        return Ticket.objects.get(pk=ticket_id)
    except Ticket.DoesNotExist:
        raise TicketNotFound(ticket_id) from None


def check_in_ticket(ticket_id: UUID | str, event_id: UUID | str, staff: TicketingUser) -> Ticket:
    """Admit a scanned ticket to an event.

    The flag is flipped with a conditional update, so of two concurrent scans of the
    same ticket exactly one succeeds and the other sees the winner's timestamp.

    Raises:
        MalformedId: Either id is not a UUID.
        TicketNotFound: No ticket has this id.
        EventMismatch: The ticket belongs to another event.
        AlreadyRedeemed: The ticket was checked in before.
        TicketRefunded: The ticket has been refunded.
        StorageFailure: The database failed.
    """
    ticket_uuid = parse_uuid(ticket_id, "ticket_id")
    event_uuid = parse_uuid(event_id, "event_id")

    with storage_guard("check_in", ticket_id=str(ticket_uuid), event_id=str(event_uuid)):
        ticket = _load_ticket(ticket_uuid)
        if ticket.event_id != event_uuid:
            raise EventMismatch(ticket_uuid, event_uuid)
        if ticket.is_checked_in:
            raise AlreadyRedeemed(ticket_uuid, ticket.checked_in_at)
        if ticket.status == Ticket.TicketStatus.REFUNDED:
            raise TicketRefunded(ticket_uuid)

        now = timezone.now()
        updated = Ticket.objects.filter(
            pk=ticket_uuid,
            is_checked_in=False,
            status=Ticket.TicketStatus.ACTIVE,
        ).update(is_checked_in=True, checked_in_at=now, checked_in_by=staff, updated_at=now)

        if not updated:
            # lost a race against another scan or a refund
            current = _load_ticket(ticket_uuid)
            if current.is_checked_in:
                raise AlreadyRedeemed(ticket_uuid, current.checked_in_at)
            raise TicketRefunded(ticket_uuid)

    logger.info("ticket_checked_in", ticket_id=str(ticket_uuid), event_id=str(event_uuid), staff_id=str(staff.id))
    return Ticket.objects.full().get(pk=ticket_uuid)


def list_manageable_events() -> list[Event]:
    """Approved events staff can admit guests to, in date order."""
    return list(Event.objects.approved().order_by("date", "time"))


def get_check_in_stats(event_id: UUID | str) -> dict[str, object]:
    """Sold versus admitted counts for the door screen."""
    event = catalog_service.get_event(event_id)
    checked_in = Ticket.objects.active().filter(event=event).aggregate(
        count=Count("id", filter=Q(is_checked_in=True))
    )["count"]
    return {
        "event_id": event.id,
        "event_name": event.name,
        "total_tickets": event.tickets_sold,
        "checked_in_count": checked_in,
    }
