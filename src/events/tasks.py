"""Celery tasks delivering tickets by email."""

import structlog
from celery import shared_task
from django.template.loader import render_to_string

from common.tasks import send_email
from events import email_helpers
from events.models import Ticket

logger = structlog.get_logger(__name__)


@shared_task
def send_purchase_confirmation(recipient_email: str, ticket_ids: list[str]) -> None:
    """Send the confirmation of a checkout with one QR code per ticket."""
    tickets = list(Ticket.objects.full().filter(pk__in=ticket_ids).order_by("event__date", "event__name", "id"))
    if not tickets:
        logger.warning("purchase_confirmation_without_tickets", ticket_ids=ticket_ids)
        return
    context = email_helpers.build_purchase_context(tickets)
    send_email(
        to=recipient_email,
        subject=email_helpers.PURCHASE_CONFIRMATION_SUBJECT,
        body=render_to_string("events/emails/purchase_confirmation.txt", context),
        html_body=render_to_string("events/emails/purchase_confirmation.html", context),
    )
    logger.info("purchase_confirmation_sent", ticket_count=len(tickets))


@shared_task
def resend_ticket(ticket_id: str) -> None:
    """Send a single ticket again."""
    ticket = Ticket.objects.full().filter(pk=ticket_id).first()
    if ticket is None:
        logger.warning("resend_ticket_missing", ticket_id=ticket_id)
        return
    recipient = email_helpers.ticket_recipient(ticket)
    if not recipient:
        logger.warning("resend_ticket_without_recipient", ticket_id=ticket_id)
        return
    context = email_helpers.build_resend_context(ticket)
    send_email(
        to=recipient,
        subject=email_helpers.resend_subject(ticket),
        body=render_to_string("events/emails/ticket_resend.txt", context),
        html_body=render_to_string("events/emails/ticket_resend.html", context),
    )
    logger.info("ticket_resent", ticket_id=ticket_id)
