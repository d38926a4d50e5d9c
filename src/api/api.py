from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from accounts.controllers.account import AccountController
from accounts.controllers.auth import AuthController
from accounts.controllers.users import UserAdminController
from common.schema import ResponseOk, VersionResponse
from events.controllers.check_in import CheckInController
from events.controllers.events import EventController
from events.controllers.purchases import PurchaseController
from events.controllers.refunds import RefundController
from events.controllers.sales import SalesController, TicketAdminController
from events.controllers.submissions import SubmissionController
from events.exceptions import TicketingError

from .exception_handlers import (
    handle_django_validation_error,
    handle_general_exception,
    handle_ticketing_error,
)

api = NinjaExtraAPI(
    title="Click eTickets API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"Click eTickets API {settings.VERSION}",
    app_name=f"etickets-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse}, url_name="version")
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk}, url_name="healthcheck")
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API."""
    return 200, ResponseOk()


api.register_controllers(
    # Auth/Account controllers
    AuthController,
    AccountController,
    UserAdminController,
    # Catalog and moderation
    EventController,
    SubmissionController,
    # Ticket inventory
    PurchaseController,
    CheckInController,
    RefundController,
    SalesController,
    TicketAdminController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    TicketingError: handle_ticketing_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
