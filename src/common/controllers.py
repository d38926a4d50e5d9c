import typing as t

from django.contrib.auth.models import AnonymousUser
from ninja_extra import ControllerBase

from accounts.models import TicketingUser


class UserAwareController(ControllerBase):
    def maybe_user(self) -> TicketingUser | AnonymousUser:
        """Get the user for this request."""
        return t.cast(TicketingUser | AnonymousUser, self.context.request.user)  # type: ignore[union-attr]

    def user(self) -> TicketingUser:
        """Get the user for this request."""
        return t.cast(TicketingUser, self.context.request.user)  # type: ignore[union-attr]
