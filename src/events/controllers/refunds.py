from ninja_extra import api_controller, route

from common.auth_base import AdminAuth
from common.controllers import UserAwareController
from common.schema import ErrorResponse
from events import schema
from events.service import refund_service


@api_controller("/refunds", auth=AdminAuth(), tags=["Refunds"])
class RefundController(UserAwareController):
    @route.post(
        "/tickets/{ticket_id}",
        url_name="refund_ticket",
        response={200: schema.RefundResponseSchema, 400: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
    )
    def refund_ticket(self, ticket_id: str) -> dict[str, object]:
        """Refund a single ticket and release its seat."""
        result = refund_service.refund_ticket(ticket_id, self.user())
        return {
            "message": "Ticket refunded successfully.",
            "ticket": result.ticket,
            "refund_amount": result.amount,
        }

    @route.post(
        "/events/{event_id}",
        url_name="refund_event",
        response={200: schema.BulkRefundResponseSchema, 400: ErrorResponse, 404: ErrorResponse},
    )
    def refund_event(self, event_id: str) -> dict[str, object]:
        """Refund every active ticket of an event, e.g. when it is cancelled."""
        result = refund_service.refund_event(event_id, self.user())
        return {
            "message": f"Successfully refunded {result.refunded_count} tickets.",
            "event_id": result.event.id,
            "refunded_count": result.refunded_count,
            "total_refund_amount": result.total_amount,
        }
