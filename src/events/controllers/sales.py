from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate

from common.auth_base import AdminAuth
from common.controllers import UserAwareController
from common.schema import ErrorResponse, ResponseMessage
from events import filters, models, schema
from events.service import notification_service, sales_service


@api_controller("/sales", auth=AdminAuth(), tags=["Sales"])
class SalesController(UserAwareController):
    @route.get("/", url_name="list_sales", response=PaginatedResponseSchema[schema.SaleTicketSchema])
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_sales(
        self,
        params: filters.SalesFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Ticket]:
        """Tickets of current and recent events, newest purchase first.

        ``search`` matches a ticket id or the customer's name or email.
        """
        return sales_service.list_sales(search=params.search, event_id=params.event_id)


@api_controller("/tickets", auth=AdminAuth(), tags=["Sales"])
class TicketAdminController(UserAwareController):
    @route.post(
        "/{ticket_id}/resend",
        url_name="resend_ticket",
        response={200: ResponseMessage, 400: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
    )
    def resend(self, ticket_id: str) -> ResponseMessage:
        """Email a ticket to its holder again."""
        ticket = notification_service.request_ticket_resend(ticket_id, self.user())
        return ResponseMessage(message=f"Ticket resent to {ticket.customer_email}.")
