"""Base authentication classes for the etickets API."""

import typing as t

from django.contrib.auth.models import AnonymousUser
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _
from ninja_extra import status
from ninja_extra.exceptions import APIException
from ninja_jwt.authentication import JWTAuth


class PermissionDenied(APIException):
    """Exception raised when user doesn't have required permissions."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("Permission denied")


class BaseJWTAuth(JWTAuth):
    """Base JWT authentication with customizable permission checking.

    Optionally requires the marketplace admin role on top of a plain token validation.
    """

    def __init__(self, *, requires_admin: bool = False) -> None:
        """Initialize the BaseJWTAuth authentication class.

        Args:
            requires_admin: Whether the user must hold the admin role.
        """
        self.requires_admin = requires_admin
        super().__init__()

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        """Authenticate and verify user permissions.

        Raises:
            PermissionDenied: If user doesn't meet required criteria
        """
        user = super().authenticate(request, token)

        is_admin = getattr(user, "is_admin", False)
        if self.requires_admin and user and not isinstance(user, AnonymousUser) and not is_admin:
            raise PermissionDenied(str(_("Admin access required.")))

        return user


class AdminAuth(BaseJWTAuth):
    """JWT authentication restricted to marketplace admins."""

    def __init__(self) -> None:
        """Require the admin role."""
        super().__init__(requires_admin=True)
