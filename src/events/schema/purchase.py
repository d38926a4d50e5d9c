"""Checkout request and response schemas."""

import datetime
from decimal import Decimal
from uuid import UUID

from ninja import Schema
from pydantic import EmailStr, Field

from common.schema import OneToOneFiftyString, StrippedString


class CustomerInfoSchema(Schema):
    first_name: OneToOneFiftyString
    last_name: OneToOneFiftyString
    email: EmailStr
    phone: StrippedString = Field(..., min_length=1, max_length=32)


class PurchaseLineSchema(Schema):
    ticket_type: StrippedString = Field(..., min_length=1)
    quantity: int


class PurchaseGroupSchema(Schema):
    event_id: str = Field(..., min_length=1)
    lines: list[PurchaseLineSchema] = Field(..., min_length=1)


class PurchaseRequestSchema(Schema):
    """A cart spanning one or more events plus the buyer's contact details."""

    groups: list[PurchaseGroupSchema] = Field(..., min_length=1)
    customer: CustomerInfoSchema


class PurchasedTicketSchema(Schema):
    ticket_id: UUID = Field(alias="id")
    event_id: UUID
    event_name: str = Field(alias="event.name")
    event_date: datetime.date = Field(alias="event.date")
    event_time: str = Field(alias="event.formatted_time")
    ticket_type: str
    price: Decimal


class PurchaseResponseSchema(Schema):
    message: str
    tickets: list[PurchasedTicketSchema]
    total_price: Decimal
