"""Event catalog: submissions, moderation, the public listing and the sold counter."""

import typing as t
from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import F
from django.db.models.functions import Greatest

from accounts.models import TicketingUser
from events.exceptions import EventHasActiveTickets, EventNotFound, InvalidStatusTransition
from events.models import Event, Ticket, TicketType
from events.schema import EventSubmissionSchema, TicketTypeInSchema
from events.service import update_db_instance
from events.utils import parse_uuid

logger = structlog.get_logger(__name__)


def get_event(event_id: UUID | str, *, approved_only: bool = False) -> Event:
    """Load an event with its price list.

    Raises:
        EventNotFound: If there is no such event, or it is not approved and
            ``approved_only`` is set.
    """
    qs = Event.objects.approved() if approved_only else Event.objects.all()
    try:
        return qs.with_ticket_types().get(pk=parse_uuid(event_id, "event_id"))
    except Event.DoesNotExist:
        raise EventNotFound(event_id) from None


def list_approved() -> t.Any:
    """Approved events in date order, for the public listing."""
    return Event.objects.approved().with_ticket_types().order_by("date", "time")


def list_submissions() -> t.Any:
    """All submissions, newest first."""
    return Event.objects.with_ticket_types().order_by("-submitted_at")


def list_ticket_types(event_id: UUID | str) -> list[TicketType]:
    return list(TicketType.objects.filter(event_id=parse_uuid(event_id, "event_id")).order_by("display_order", "label"))


def update_tickets_sold(event_id: UUID, *, delta: int | None = None, absolute: int | None = None) -> None:
    """Write the sold counter of an event.

    Must run inside the transaction that writes the corresponding ledger rows, with
    the event row already locked. Decrements never take the counter below zero.
    """
    if (delta is None) == (absolute is None):
        raise ValueError("Pass exactly one of delta or absolute.")
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("update_tickets_sold must run inside a transaction.")
    value = Greatest(F("tickets_sold") + delta, 0) if delta is not None else absolute
    Event.objects.filter(pk=event_id).update(tickets_sold=value)


def _create_ticket_types(event: Event, ticket_types: list[TicketTypeInSchema]) -> None:
    for position, ticket_type in enumerate(ticket_types):
        TicketType.objects.create(
            event=event,
            label=ticket_type.label,
            price=ticket_type.price,
            includes=ticket_type.includes,
            display_order=position,
        )


@transaction.atomic
def submit_event(payload: EventSubmissionSchema) -> Event:
    """Store a promoter's submission as a pending event."""
    data = payload.model_dump(exclude={"ticket_types", "flyer_url"})
    event = Event.objects.create(
        **data,
        flyer_url=str(payload.flyer_url) if payload.flyer_url else "",
        status=Event.EventStatus.PENDING,
    )
    _create_ticket_types(event, payload.ticket_types)
    logger.info("event_submitted", event_id=str(event.id), ticket_types=len(payload.ticket_types))
    return get_event(event.pk)


@transaction.atomic
def set_status(event_id: UUID | str, status: str, actor: TicketingUser | None = None) -> Event:
    """Approve or deny a pending submission.

    Raises:
        EventNotFound: If there is no such event.
        InvalidStatusTransition: If the event has already been decided.
    """
    event = _lock_event(event_id)
    if not event.can_transition_to(status):
        raise InvalidStatusTransition(event.status, status)
    previous = event.status
    event.status = status
    event.save(update_fields=["status", "updated_at"])
    logger.info(
        "event_status_changed",
        event_id=str(event.id),
        from_status=previous,
        to_status=status,
        actor_id=str(actor.id) if actor else None,
    )
    return get_event(event.pk)


@transaction.atomic
def update_event(event_id: UUID | str, payload: EventSubmissionSchema) -> Event:
    """Replace an event's details and price list.

    The capacity can be raised or lowered freely as long as it stays at or above the
    number of tickets already sold. Issued tickets keep the label and price they were
    bought with.
    """
    event = _lock_event(event_id)
    event = update_db_instance(
        event,
        payload,
        exclude={"ticket_types", "flyer_url"},
        flyer_url=str(payload.flyer_url) if payload.flyer_url else "",
    )
    event.ticket_types.all().delete()
    _create_ticket_types(event, payload.ticket_types)
    logger.info("event_updated", event_id=str(event.id), ticket_count=event.ticket_count)
    return get_event(event.pk)


@transaction.atomic
def delete_event(event_id: UUID | str) -> None:
    """Delete an event whose tickets have all been refunded.

    Raises:
        EventHasActiveTickets: If any ticket still holds capacity.
    """
    event = _lock_event(event_id)
    active = Ticket.objects.active().filter(event=event).count()
    if active:
        raise EventHasActiveTickets(event.pk, active)
    event.delete()
    logger.info("event_deleted", event_id=str(event_id))


@transaction.atomic
def recount_tickets_sold(event_id: UUID | str) -> tuple[int, int]:
    """Recompute the sold counter from the ledger.

    Returns:
        The counter before and after the recount.
    """
    event = _lock_event(event_id)
    actual = Ticket.objects.active().filter(event=event).count()
    if actual != event.tickets_sold:
        logger.warning(
            "tickets_sold_drift_repaired",
            event_id=str(event.id),
            stored=event.tickets_sold,
            actual=actual,
        )
        update_tickets_sold(event.pk, absolute=actual)
    return event.tickets_sold, actual


def _lock_event(event_id: UUID | str) -> Event:
    event = Event.objects.select_for_update().filter(pk=parse_uuid(event_id, "event_id")).first()
    if event is None:
        raise EventNotFound(event_id)
    return event
