import datetime
import typing as t
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import AnyHttpUrl, Field, field_validator

from common.schema import OneToOneFiftyString, StrippedString
from events.models import Event, TicketType

OneToHundredString = t.Annotated[StrippedString, Field(min_length=1, max_length=100)]
OneToTwoFiftyFiveString = t.Annotated[StrippedString, Field(min_length=1, max_length=255)]


class TicketTypeSchema(ModelSchema):
    class Meta:
        model = TicketType
        fields = ["label", "price", "includes", "display_order"]


class EventSchema(ModelSchema):
    """Public view of an approved event."""

    id: UUID
    formatted_time: str
    remaining_capacity: int
    ticket_types: list[TicketTypeSchema]

    class Meta:
        model = Event
        fields = [
            "name",
            "description",
            "date",
            "time",
            "location",
            "flyer_url",
            "business_name",
            "ticket_count",
            "tickets_sold",
        ]


class SubmissionSchema(EventSchema):
    """Admin view of a submission, including promoter contact and status."""

    status: Event.EventStatus
    submitted_at: datetime.datetime
    promoter_first_name: str
    promoter_last_name: str
    promoter_phone: str


class ManageableEventSchema(Schema):
    """Compact event used by the check-in screen's event picker."""

    id: UUID
    name: str
    date: datetime.date
    time: datetime.time
    formatted_time: str
    location: str
    tickets_sold: int


class TicketTypeInSchema(Schema):
    label: OneToHundredString
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    includes: StrippedString = ""


class EventSubmissionSchema(Schema):
    """A promoter's event submission. Admin edits use the same shape."""

    name: OneToTwoFiftyFiveString
    description: StrippedString = ""
    date: datetime.date
    time: datetime.time
    location: OneToTwoFiftyFiveString
    promoter_first_name: OneToOneFiftyString
    promoter_last_name: OneToOneFiftyString
    business_name: StrippedString = Field("", max_length=255)
    promoter_phone: StrippedString = Field("", max_length=32)
    flyer_url: AnyHttpUrl | None = None
    ticket_count: int = Field(..., ge=0)
    ticket_types: list[TicketTypeInSchema] = Field(..., min_length=1)

    @field_validator("ticket_types")
    @classmethod
    def labels_are_unique(cls, value: list[TicketTypeInSchema]) -> list[TicketTypeInSchema]:
        """Labels identify ticket types at checkout, so they must be unique per event."""
        labels = [ticket_type.label for ticket_type in value]
        if len(labels) != len(set(labels)):
            raise ValueError("Ticket type labels must be unique within an event.")
        return value


class EventStatusUpdateSchema(Schema):
    status: t.Literal["approved", "denied"]


class CheckInStatsSchema(Schema):
    event_id: UUID
    event_name: str
    total_tickets: int
    checked_in_count: int
