"""Domain failures of the ticket inventory.

Every failure carries a machine readable ``code``, the HTTP status it maps to, a
human readable message and the context needed to render precise guidance
(remaining capacity, original redemption time, ...). ``api.exception_handlers``
turns them into ``{"code": ..., "detail": ..., **extra}`` responses.
"""

import typing as t
from datetime import datetime
from uuid import UUID

from django.utils.translation import gettext_lazy as _


class TicketingError(Exception):
    """Base class of every ticket inventory failure."""

    code: t.ClassVar[str] = "ticketing_error"
    status_code: t.ClassVar[int] = 400
    default_detail: t.ClassVar[t.Any] = _("The request could not be processed.")

    def __init__(self, detail: str | None = None, **extra: t.Any) -> None:
        self.detail = str(detail or self.default_detail)
        self.extra = extra
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, t.Any]:
        """Serialize the failure for an API response."""
        payload: dict[str, t.Any] = {"code": self.code, "detail": self.detail}
        for key, value in self.extra.items():
            if isinstance(value, UUID):
                value = str(value)
            elif isinstance(value, datetime):
                value = value.isoformat()
            payload[key] = value
        return payload


class EventUnavailable(TicketingError):
    code = "event_unavailable"

    def __init__(self, event_id: UUID | str) -> None:
        super().__init__(str(_("This event is not available for purchase.")), event_id=event_id)


class UnknownTicketType(TicketingError):
    code = "unknown_ticket_type"

    def __init__(self, event_id: UUID | str, ticket_type: str) -> None:
        super().__init__(
            str(_("Ticket type '%(ticket_type)s' does not exist for this event.")) % {"ticket_type": ticket_type},
            event_id=event_id,
            ticket_type=ticket_type,
        )


class InvalidQuantity(TicketingError):
    code = "invalid_quantity"

    def __init__(self, ticket_type: str, quantity: t.Any) -> None:
        super().__init__(
            str(_("Quantity must be a positive whole number.")),
            ticket_type=ticket_type,
            quantity=quantity,
        )


class CapacityExceeded(TicketingError):
    code = "capacity_exceeded"
    status_code = 409

    def __init__(self, event_id: UUID | str, event_name: str, requested: int, remaining: int) -> None:
        super().__init__(
            str(_("Not enough tickets left for %(event_name)s. remaining: %(remaining)d"))
            % {"event_name": event_name, "remaining": remaining},
            event_id=event_id,
            requested=requested,
            remaining=remaining,
        )
        self.remaining = remaining


class TicketNotFound(TicketingError):
    code = "ticket_not_found"
    status_code = 404

    def __init__(self, ticket_id: UUID | str) -> None:
        super().__init__(str(_("Invalid ticket: not found in the system.")), ticket_id=ticket_id)


class EventMismatch(TicketingError):
    code = "event_mismatch"

    def __init__(self, ticket_id: UUID | str, event_id: UUID | str) -> None:
        super().__init__(
            str(_("Ticket mismatch: this ticket is not for the selected event.")),
            ticket_id=ticket_id,
            event_id=event_id,
        )


class AlreadyRedeemed(TicketingError):
    code = "already_redeemed"
    status_code = 409

    def __init__(self, ticket_id: UUID | str, checked_in_at: datetime) -> None:
        super().__init__(
            str(_("Already redeemed: ticket was checked in at %(checked_in_at)s."))
            % {"checked_in_at": checked_in_at.isoformat()},
            ticket_id=ticket_id,
            checked_in_at=checked_in_at,
        )
        self.checked_in_at = checked_in_at


class TicketRefunded(TicketingError):
    code = "ticket_refunded"
    status_code = 409

    def __init__(self, ticket_id: UUID | str) -> None:
        super().__init__(str(_("This ticket has been refunded and is no longer valid.")), ticket_id=ticket_id)


class AlreadyRefunded(TicketingError):
    code = "already_refunded"
    status_code = 409

    def __init__(self, ticket_id: UUID | str) -> None:
        super().__init__(str(_("This ticket has already been refunded.")), ticket_id=ticket_id)


class EventNotFound(TicketingError):
    code = "event_not_found"
    status_code = 404

    def __init__(self, event_id: UUID | str) -> None:
        super().__init__(str(_("Event not found.")), event_id=event_id)


class NothingToRefund(TicketingError):
    code = "nothing_to_refund"
    status_code = 404

    def __init__(self, event_id: UUID | str) -> None:
        super().__init__(str(_("No active tickets found for this event to refund.")), event_id=event_id)


class MalformedId(TicketingError):
    code = "malformed_id"

    def __init__(self, field: str, value: t.Any) -> None:
        super().__init__(str(_("'%(field)s' is not a valid identifier.")) % {"field": field}, field=field)
        self.value = value


class InvalidStatusTransition(TicketingError):
    code = "invalid_status_transition"

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            str(_("An event cannot move from %(current)s to %(requested)s."))
            % {"current": current, "requested": requested},
            **{"from": current, "to": requested},
        )


class EventHasActiveTickets(TicketingError):
    code = "event_has_active_tickets"
    status_code = 409

    def __init__(self, event_id: UUID | str, active_tickets: int) -> None:
        super().__init__(
            str(_("Refund the %(count)d active ticket(s) before deleting this event.")) % {"count": active_tickets},
            event_id=event_id,
            active_tickets=active_tickets,
        )


class StorageFailure(TicketingError):
    code = "storage_failure"
    status_code = 503
    default_detail = _("The request could not be completed. Please try again later.")

    def __init__(self) -> None:
        super().__init__()
