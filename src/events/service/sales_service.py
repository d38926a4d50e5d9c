from uuid import UUID

from events.models import Event, Ticket
from events.models.ticket import TicketQuerySet
from events.utils import parse_uuid


def list_sales(*, search: str | None = None, event_id: UUID | str | None = None) -> TicketQuerySet:
    """Tickets of events that are upcoming or took place within the lookback window.

    An ``event_id`` outside the window yields no tickets rather than an error.
    """
    qs = Ticket.objects.full().filter(event__in=Event.objects.in_sales_window())
    if event_id:
        qs = qs.filter(event_id=parse_uuid(event_id, "event_id"))
    if search:
        qs = qs.search(search)
    return qs.order_by("-purchased_at")
