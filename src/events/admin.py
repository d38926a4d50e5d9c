import typing as t

from django.contrib import admin
from django.db import transaction
from django.urls import reverse
from django.utils.html import format_html

from . import models

CONTACT_FIELDS = ["customer_first_name", "customer_last_name", "customer_email", "customer_phone"]


class EventLinkMixin:
    """Mixin to add a link to the owning event."""

    @admin.display(description="Event")
    def event_link(self, obj: t.Any) -> str:
        url = reverse("admin:events_event_change", args=[obj.event_id])
        return format_html('<a href="{}">{}</a>', url, obj.event.name)


class TicketTypeInline(admin.TabularInline):  # type: ignore[type-arg]
    model = models.TicketType
    extra = 0
    fields = ["label", "price", "includes", "display_order"]


@admin.register(models.Event)
class EventAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["name", "date", "time", "location", "status", "tickets_sold", "ticket_count", "submitted_at"]
    list_filter = ["status", "date"]
    search_fields = ["name", "location", "promoter_first_name", "promoter_last_name", "business_name"]
    # the counter is only written together with the ledger
    readonly_fields = ["id", "tickets_sold", "submitted_at", "created_at", "updated_at"]
    date_hierarchy = "date"
    inlines = [TicketTypeInline]

    def save_model(self, request: t.Any, obj: models.Event, form: t.Any, change: bool) -> None:
        """Save the edited event without writing back a stale sold counter."""
        if not change:
            super().save_model(request, obj, form, change)
            return
        with transaction.atomic():
            locked = models.Event.objects.select_for_update().only("tickets_sold").get(pk=obj.pk)
            obj.tickets_sold = locked.tickets_sold
            obj.save(update_fields=self._editable_fields(obj))

    @staticmethod
    def _editable_fields(obj: models.Event) -> list[str]:
        excluded = {"id", "tickets_sold", "created_at"}
        return [f.name for f in obj._meta.concrete_fields if f.name not in excluded]


@admin.register(models.Ticket)
class TicketAdmin(admin.ModelAdmin, EventLinkMixin):  # type: ignore[type-arg]
    list_display = [
        "id",
        "event_link",
        "ticket_type",
        "price",
        "customer_email",
        "status",
        "is_checked_in",
        "purchased_at",
    ]
    list_filter = ["status", "is_checked_in", "event__name"]
    search_fields = ["id", "customer_email", "customer_first_name", "customer_last_name", "event__name"]
    readonly_fields = [
        "id",
        "event",
        "user",
        "ticket_type",
        "price",
        "purchased_at",
        "status",
        "refunded_at",
        "is_checked_in",
        "checked_in_at",
        "checked_in_by",
    ]
    date_hierarchy = "purchased_at"

    def has_add_permission(self, request: t.Any) -> bool:
        """Tickets are only issued by the checkout."""
        return False

    def save_model(self, request: t.Any, obj: models.Ticket, form: t.Any, change: bool) -> None:
        """Only the contact details are written; status and check-in belong to the services."""
        obj.save(update_fields=[*CONTACT_FIELDS, "updated_at"])
