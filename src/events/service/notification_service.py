"""Hands ticket emails to the task queue.

Delivery is best effort: a broker outage is logged and never undoes a committed
purchase.
"""

from uuid import UUID

import structlog

from accounts.models import TicketingUser
from events.exceptions import TicketNotFound, TicketRefunded
from events.models import Ticket
from events.tasks import resend_ticket, send_purchase_confirmation
from events.utils import parse_uuid

logger = structlog.get_logger(__name__)


def dispatch_purchase_confirmation(recipient_email: str, ticket_ids: list[UUID]) -> None:
    """Queue the purchase confirmation; runs after the checkout has committed."""
    try:
        send_purchase_confirmation.delay(recipient_email, [str(pk) for pk in ticket_ids])
    except Exception:
        logger.exception("purchase_confirmation_dispatch_failed", ticket_count=len(ticket_ids))


def request_ticket_resend(ticket_id: UUID | str, staff: TicketingUser) -> Ticket:
    """Queue a ticket email again on behalf of a customer.

    Raises:
        TicketNotFound: If there is no such ticket.
        TicketRefunded: If the ticket is no longer valid.
    """
    ticket_uuid = parse_uuid(ticket_id, "ticket_id")
    ticket = Ticket.objects.full().filter(pk=ticket_uuid).first()
    if ticket is None:
        raise TicketNotFound(ticket_uuid)
    if ticket.status == Ticket.TicketStatus.REFUNDED:
        raise TicketRefunded(ticket_uuid)
    resend_ticket.delay(str(ticket.pk))
    logger.info("ticket_resend_requested", ticket_id=str(ticket.pk), staff_id=str(staff.id))
    return ticket
