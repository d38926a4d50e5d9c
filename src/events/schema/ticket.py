"""Ticket ledger schemas: the buyer's wallet, the sales report, check-in and refunds."""

import datetime
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field

from events.models import Ticket


class MyTicketSchema(Schema):
    ticket_id: UUID = Field(alias="id")
    event_id: UUID
    event_name: str = Field(alias="event.name")
    event_date: datetime.date = Field(alias="event.date")
    event_time: str = Field(alias="event.formatted_time")
    event_location: str = Field(alias="event.location")
    flyer_url: str = Field(alias="event.flyer_url")
    ticket_type: str
    price: Decimal
    status: Ticket.TicketStatus
    purchased_at: datetime.datetime
    is_checked_in: bool


class SaleTicketSchema(ModelSchema):
    """A ledger row as shown in the admin sales report."""

    id: UUID
    event_id: UUID
    event_name: str = Field(alias="event.name")
    event_date: datetime.date = Field(alias="event.date")
    customer_name: str
    user_id: UUID | None = None
    checked_in_by_id: UUID | None = None

    class Meta:
        model = Ticket
        fields = [
            "ticket_type",
            "price",
            "status",
            "purchased_at",
            "refunded_at",
            "customer_first_name",
            "customer_last_name",
            "customer_email",
            "customer_phone",
            "is_checked_in",
            "checked_in_at",
        ]


class CheckInRequestSchema(Schema):
    """Scanned QR payload plus the event the door is admitting to.

    Both ids are taken as plain strings so a garbled scan is reported as a malformed
    identifier rather than a generic validation failure.
    """

    ticket_id: str = Field(..., min_length=1)
    event_id: str = Field(..., min_length=1)


class CheckInResponseSchema(Schema):
    message: str
    ticket: SaleTicketSchema


class RefundResponseSchema(Schema):
    message: str
    ticket: SaleTicketSchema
    refund_amount: Decimal


class BulkRefundResponseSchema(Schema):
    message: str
    event_id: UUID
    refunded_count: int
    total_refund_amount: Decimal
