import typing as t
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Prefetch, Q
from django.utils import timezone

from common.models import TimeStampedModel


class EventQuerySet(models.QuerySet["Event"]):
    def approved(self) -> t.Self:
        """Events open for sale and public listing."""
        return self.filter(status=Event.EventStatus.APPROVED)

    def with_ticket_types(self) -> t.Self:
        """Prefetch the price list in display order."""
        return self.prefetch_related(
            Prefetch("ticket_types", queryset=TicketType.objects.order_by("display_order", "label"))
        )

    def in_sales_window(self) -> t.Self:
        """Events dated in the future or within the sales lookback period."""
        cutoff = timezone.now() - timedelta(hours=settings.SALES_LOOKBACK_HOURS)
        return self.filter(date__gte=cutoff.date())


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get base queryset."""
        return EventQuerySet(self.model, using=self._db)

    def approved(self) -> EventQuerySet:
        """Events open for sale and public listing."""
        return self.get_queryset().approved()

    def with_ticket_types(self) -> EventQuerySet:
        """Prefetch the price list in display order."""
        return self.get_queryset().with_ticket_types()

    def in_sales_window(self) -> EventQuerySet:
        """Events dated in the future or within the sales lookback period."""
        return self.get_queryset().in_sales_window()


class Event(TimeStampedModel):
    """A promoter submission; once approved, a sellable event.

    ``tickets_sold`` always equals the number of active tickets of the event. It is only
    written under a row lock inside the transaction that writes the tickets.
    """

    class EventStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        DENIED = "denied", "Denied"

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")
    date = models.DateField(db_index=True)
    time = models.TimeField()
    location = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20, choices=EventStatus.choices, default=EventStatus.PENDING, db_index=True
    )
    submitted_at = models.DateTimeField(default=timezone.now, editable=False)

    promoter_first_name = models.CharField(max_length=150)
    promoter_last_name = models.CharField(max_length=150)
    business_name = models.CharField(max_length=255, blank=True, default="")
    promoter_phone = models.CharField(max_length=32, blank=True, default="")
    flyer_url = models.URLField(blank=True, default="", help_text="Externally hosted flyer image.")

    ticket_count = models.PositiveIntegerField(help_text="Maximum number of tickets that can be active at once.")
    tickets_sold = models.PositiveIntegerField(default=0, help_text="Number of currently active tickets.")

    objects = EventManager()

    class Meta:
        ordering = ["date", "time"]
        constraints = [
            models.CheckConstraint(
                condition=Q(tickets_sold__lte=models.F("ticket_count")),
                name="event_tickets_sold_within_capacity",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.date})"

    @property
    def remaining_capacity(self) -> int:
        """Tickets still available."""
        return max(0, self.ticket_count - self.tickets_sold)

    @property
    def formatted_time(self) -> str:
        """Time of day as shown to customers, e.g. ``7:30 PM``."""
        from events.utils import format_time_12h

        return format_time_12h(self.time)

    def can_transition_to(self, status: str) -> bool:
        """Pending submissions may be approved or denied; both are terminal."""
        return self.status == self.EventStatus.PENDING and status in (
            self.EventStatus.APPROVED,
            self.EventStatus.DENIED,
        )

    def clean(self) -> None:
        """Capacity may never drop below what has been sold."""
        super().clean()
        if self.ticket_count is not None and self.tickets_sold > self.ticket_count:
            raise DjangoValidationError(
                {"ticket_count": "Ticket count cannot be lower than the number of tickets already sold."}
            )


class TicketType(TimeStampedModel):
    """One line of an event's price list."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="ticket_types")
    label = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    includes = models.TextField(blank=True, default="")
    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["event", "display_order", "label"]
        constraints = [
            models.UniqueConstraint(fields=["event", "label"], name="unique_event_ticket_type_label"),
            models.CheckConstraint(condition=Q(price__gte=0), name="ticket_type_price_non_negative"),
        ]

    def __str__(self) -> str:
        return f"{self.label} ({self.price})"
