"""Profile endpoints for the authenticated user."""

from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _
from ninja_extra import api_controller, route

from accounts import schema
from accounts.models import TicketingUser
from accounts.service import account as account_service
from common.auth_base import BaseJWTAuth
from common.controllers import UserAwareController
from common.schema import ResponseMessage
from events.models import Ticket
from events.schema import MyTicketSchema


@api_controller("/me", tags=["Account"], auth=BaseJWTAuth())
class AccountController(UserAwareController):
    @route.get("/", response=schema.TicketingUserSchema, url_name="me")
    def me(self) -> TicketingUser:
        """Retrieve the authenticated user's profile information."""
        return self.user()

    @route.post("/password", response={200: ResponseMessage}, url_name="change-password")
    def change_password(self, payload: schema.ChangePasswordSchema) -> ResponseMessage:
        """Change the password of the authenticated user.

        Requires the current password; the new one must differ from it and meet the
        complexity rules.
        """
        account_service.change_password(self.user(), payload)
        return ResponseMessage(message=str(_("Password changed successfully.")))

    @route.get("/tickets", response=list[MyTicketSchema], url_name="my-tickets")
    def my_tickets(self) -> QuerySet[Ticket]:
        """List every ticket bought while logged in, newest first.

        Refunded tickets are included so the buyer can see the refund happened.
        """
        return Ticket.objects.with_event().filter(user=self.user()).order_by("-purchased_at")
