from django.db.models import Q
from django.utils import timezone
from ninja import FilterSchema, Schema

from events.models import Event


class SubmissionFilterSchema(FilterSchema):
    status: Event.EventStatus | None = None
    upcoming: bool | None = None

    def filter_upcoming(self, upcoming: bool | None) -> Q:
        """Only events dated today or later."""
        if upcoming:
            return Q(date__gte=timezone.localdate())
        return Q()


class SalesFilterSchema(Schema):
    search: str | None = None
    event_id: str | None = None
