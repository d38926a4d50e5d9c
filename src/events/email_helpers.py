"""Template context for ticket emails.

Tasks receive ticket ids rather than model instances, so everything the templates
need is rebuilt here from the database.
"""

import typing as t
from decimal import Decimal

from common.models import SiteSettings
from events.models import Ticket
from events.utils import qr_code_data_uri

PURCHASE_CONFIRMATION_SUBJECT = "Your Purchase Confirmation from Click eTickets"


def ticket_context(ticket: Ticket) -> dict[str, t.Any]:
    """Everything needed to render one ticket, including its scannable QR code."""
    event = ticket.event
    return {
        "ticket_id": str(ticket.id),
        "event_name": event.name,
        "event_date": event.date,
        "event_time": event.formatted_time,
        "event_location": event.location,
        "ticket_type": ticket.ticket_type,
        "price": ticket.price,
        "qr_code": qr_code_data_uri(str(ticket.id)),
    }


def my_tickets_url(site_settings: SiteSettings | None = None) -> str:
    site_settings = site_settings or SiteSettings.get_solo()
    return f"{site_settings.frontend_base_url.rstrip('/')}/mytickets.html"


def build_purchase_context(tickets: list[Ticket]) -> dict[str, t.Any]:
    """Context of the purchase confirmation.

    Account holders also get a link to their ticket wallet.
    """
    first = tickets[0]
    return {
        "customer_name": first.customer_name,
        "tickets": [ticket_context(ticket) for ticket in tickets],
        "total_price": sum((ticket.price for ticket in tickets), Decimal("0.00")),
        "my_tickets_url": my_tickets_url() if any(ticket.user_id for ticket in tickets) else None,
    }


def build_resend_context(ticket: Ticket) -> dict[str, t.Any]:
    return {
        "customer_name": ticket.customer_name,
        "ticket": ticket_context(ticket),
    }


def resend_subject(ticket: Ticket) -> str:
    return f"Your Ticket for {ticket.event.name} (Resent)"


def ticket_recipient(ticket: Ticket) -> str:
    """The address a ticket is delivered to, falling back to the buyer's account."""
    if ticket.customer_email:
        return ticket.customer_email
    return ticket.user.email if ticket.user else ""
