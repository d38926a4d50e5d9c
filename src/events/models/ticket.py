import typing as t
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from common.models import TimeStampedModel


class TicketQuerySet(models.QuerySet["Ticket"]):
    def active(self) -> t.Self:
        """Tickets that hold a unit of their event's capacity."""
        return self.filter(status=Ticket.TicketStatus.ACTIVE)

    def with_event(self) -> t.Self:
        """Select the owning event."""
        return self.select_related("event")

    def full(self) -> t.Self:
        """Select all related objects used for serialization."""
        return self.select_related("event", "user", "checked_in_by")

    def search(self, term: str) -> t.Self:
        """Match a ticket id or the customer's name or email."""
        term = term.strip()
        if not term:
            return self
        query = (
            Q(customer_first_name__icontains=term)
            | Q(customer_last_name__icontains=term)
            | Q(customer_email__icontains=term)
        )
        try:
            query |= Q(pk=UUID(term))
        except ValueError:
            pass
        return self.filter(query)


class TicketManager(models.Manager["Ticket"]):
    """Custom manager for Ticket with convenience methods for related object selection."""

    def get_queryset(self) -> TicketQuerySet:
        """Get base queryset."""
        return TicketQuerySet(self.model, using=self._db)

    def active(self) -> TicketQuerySet:
        """Tickets that hold a unit of their event's capacity."""
        return self.get_queryset().active()

    def with_event(self) -> TicketQuerySet:
        """Returns a queryset with the event selected."""
        return self.get_queryset().with_event()

    def full(self) -> TicketQuerySet:
        """Returns a queryset with all related objects selected."""
        return self.get_queryset().full()


class Ticket(TimeStampedModel):
    """One issued unit of admission.

    The id is the QR payload. Rows are only created by the checkout; the event and the
    price are frozen at purchase time. ``status`` moves from active to refunded once, and
    ``is_checked_in`` moves from False to True once.
    """

    class TicketStatus(models.TextChoices):
        ACTIVE = "active", "Active"
        REFUNDED = "refunded", "Refunded"

    IMMUTABLE_FIELDS: t.ClassVar[tuple[str, ...]] = ("event_id", "price")

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="tickets")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="tickets",
        help_text="Account that bought the ticket; empty for guest purchases.",
    )
    ticket_type = models.CharField(max_length=100, help_text="Ticket type label at purchase time.")
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    purchased_at = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(max_length=20, choices=TicketStatus.choices, default=TicketStatus.ACTIVE, db_index=True)
    refunded_at = models.DateTimeField(null=True, blank=True)

    customer_first_name = models.CharField(max_length=150)
    customer_last_name = models.CharField(max_length=150)
    customer_email = models.EmailField(db_index=True)
    customer_phone = models.CharField(max_length=32, blank=True, default="")

    is_checked_in = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    checked_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checked_in_tickets",
    )

    objects = TicketManager()

    class Meta:
        ordering = ["-purchased_at"]
        indexes = [
            models.Index(fields=["event", "status"], name="ix_ticket_event_status"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(is_checked_in=True, checked_in_at__isnull=False)
                    | Q(is_checked_in=False, checked_in_at__isnull=True, checked_in_by__isnull=True)
                ),
                name="ticket_check_in_fields_consistent",
            ),
            models.CheckConstraint(condition=Q(price__gte=0), name="ticket_price_non_negative"),
        ]

    def __str__(self) -> str:
        return f"Ticket {self.id} ({self.ticket_type})"

    @classmethod
    def from_db(cls, db: str | None, field_names: t.Any, values: t.Any) -> "Ticket":
        """Remember the loaded values of the fields that may not change."""
        instance = super().from_db(db, field_names, values)
        instance._loaded_values = {
            name: getattr(instance, name) for name in cls.IMMUTABLE_FIELDS if name in instance.__dict__
        }
        return t.cast("Ticket", instance)

    def clean(self) -> None:
        """Reject changes to the event or the price of an issued ticket."""
        super().clean()
        loaded = getattr(self, "_loaded_values", {})
        errors = {
            name.removesuffix("_id"): "This field cannot be changed once the ticket is issued."
            for name, value in loaded.items()
            if getattr(self, name) != value
        }
        if errors:
            raise DjangoValidationError(errors)

    @property
    def customer_name(self) -> str:
        """Full customer name."""
        return f"{self.customer_first_name} {self.customer_last_name}".strip()
