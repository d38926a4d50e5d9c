import structlog
from ninja_extra import api_controller, route

from common.authentication import OptionalAuth
from common.controllers import UserAwareController
from common.schema import ErrorResponse
from events import schema
from events.service.purchase_service import PurchaseService, resolve_purchaser

logger = structlog.get_logger(__name__)


@api_controller("/purchases", auth=OptionalAuth(), tags=["Purchases"])
class PurchaseController(UserAwareController):
    @route.post(
        "/",
        url_name="purchase_tickets",
        response={200: schema.PurchaseResponseSchema, 400: ErrorResponse, 409: ErrorResponse, 503: ErrorResponse},
    )
    def purchase(self, payload: schema.PurchaseRequestSchema) -> dict[str, object]:
        """Buy tickets for one or more events.

        A bearer token links the tickets to the account; without one this is a guest
        purchase. The confirmation with the QR codes is emailed to the customer address.
        """
        purchaser = resolve_purchaser(self.maybe_user(), payload.customer)
        result = PurchaseService(purchaser).checkout(payload.groups)
        return {
            "message": "Purchase successful! Your tickets have been sent to your email.",
            "tickets": result.tickets,
            "total_price": result.total_price,
        }
