"""Recompute every event's sold counter from its ticket ledger."""

import typing as t

from django.core.management.base import BaseCommand

from events.models import Event
from events.service import catalog_service


class Command(BaseCommand):
    """Repair drift between ``Event.tickets_sold`` and the active tickets of the event."""

    help = "Recount tickets_sold from the active tickets of each event."

    def add_arguments(self, parser: t.Any) -> None:
        """Add command arguments."""
        parser.add_argument(
            "--event",
            dest="event_ids",
            action="append",
            default=[],
            help="Only recount this event (can be repeated).",
        )

    def handle(self, *args: t.Any, **options: t.Any) -> None:
        """Recount the selected events, or all of them."""
        event_ids = options["event_ids"] or list(Event.objects.values_list("pk", flat=True))
        repaired = 0
        for event_id in event_ids:
            stored, actual = catalog_service.recount_tickets_sold(event_id)
            if stored != actual:
                repaired += 1
                self.stdout.write(self.style.WARNING(f"{event_id}: {stored} -> {actual}"))
        self.stdout.write(self.style.SUCCESS(f"Recounted {len(event_ids)} event(s), repaired {repaired}."))
