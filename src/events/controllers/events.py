from uuid import UUID

from ninja_extra import ControllerBase, api_controller, route

from events import models, schema
from events.service import catalog_service


@api_controller("/events", tags=["Events"])
class EventController(ControllerBase):
    """Public catalog of approved events."""

    @route.get("/", url_name="list_events", response=list[schema.EventSchema])
    def list_events(self) -> list[models.Event]:
        """Approved events in date order."""
        return list(catalog_service.list_approved())

    @route.get("/{event_id}", url_name="get_event", response=schema.EventSchema)
    def get_event(self, event_id: UUID) -> models.Event:
        return catalog_service.get_event(event_id, approved_only=True)
