from uuid import UUID

from ninja_extra import api_controller, route

from common.auth_base import AdminAuth
from common.controllers import UserAwareController
from common.schema import ErrorResponse
from events import models, schema
from events.service import check_in_service


@api_controller("/check-in", auth=AdminAuth(), tags=["Check-in"])
class CheckInController(UserAwareController):
    """Door staff endpoints."""

    @route.get("/events", url_name="check_in_events", response=list[schema.ManageableEventSchema])
    def list_events(self) -> list[models.Event]:
        return check_in_service.list_manageable_events()

    @route.get(
        "/stats/{event_id}",
        url_name="check_in_stats",
        response={200: schema.CheckInStatsSchema, 404: ErrorResponse},
    )
    def stats(self, event_id: UUID) -> dict[str, object]:
        """Tickets sold and admitted so far."""
        return check_in_service.get_check_in_stats(event_id)

    @route.post(
        "/",
        url_name="check_in_ticket",
        response={200: schema.CheckInResponseSchema, 400: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
    )
    def check_in(self, payload: schema.CheckInRequestSchema) -> dict[str, object]:
        """Admit the holder of a scanned ticket."""
        ticket = check_in_service.check_in_ticket(payload.ticket_id, payload.event_id, self.user())
        return {
            "message": f"Check-in successful for {ticket.customer_name} ({ticket.ticket_type}).",
            "ticket": ticket,
        }
