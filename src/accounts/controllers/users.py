"""Admin user management."""

from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching

from accounts import schema
from accounts.models import TicketingUser
from accounts.service import account as account_service
from common.auth_base import AdminAuth
from common.controllers import UserAwareController


@api_controller("/users", tags=["Users"], auth=AdminAuth())
class UserAdminController(UserAwareController):
    @route.get("/", response=PaginatedResponseSchema[schema.TicketingUserSchema], url_name="list_users")
    @paginate(PageNumberPaginationExtra, page_size=50)
    @searching(Searching, search_fields=["email", "first_name", "last_name"])
    def list_users(self) -> QuerySet[TicketingUser]:
        """List all registered users. Supports ?search= on email and name."""
        return TicketingUser.objects.all()

    @route.patch("/{user_id}/role", response=schema.TicketingUserSchema, url_name="set_user_role")
    def set_role(self, user_id: UUID, payload: schema.RoleUpdateSchema) -> TicketingUser:
        """Grant or revoke the admin role. Admins cannot change their own role (403)."""
        return account_service.set_role(self.user(), user_id, payload.role)
