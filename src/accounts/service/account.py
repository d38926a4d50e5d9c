"""Service layer for user accounts."""

from uuid import UUID

import structlog
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError

from accounts import schema
from accounts.models import TicketingUser
from accounts.password_validation import validate_password
from common.auth_base import PermissionDenied

logger = structlog.get_logger(__name__)


def register_user(payload: schema.RegisterUserSchema) -> TicketingUser:
    """Register a new user with the default role.

    Args:
        payload (schema.RegisterUserSchema): The user data.

    Returns:
        TicketingUser: The newly created user.
    """
    email = payload.email.lower()
    logger.info("user_registration_started", email=email)
    if TicketingUser.objects.filter(email__iexact=email).exists():
        logger.warning("user_registration_duplicate", email=email)
        raise HttpError(400, str(_("An account with this email already exists.")))
    new_user = TicketingUser.objects.create_user(
        username=email,
        email=email,
        password=payload.password1,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    logger.info("user_registration_completed", user_id=str(new_user.id), email=new_user.email)
    return new_user


def change_password(user: TicketingUser, payload: schema.ChangePasswordSchema) -> TicketingUser:
    """Change a user's password after checking the current one."""
    if not user.check_password(payload.old_password):
        logger.warning("password_change_rejected_wrong_password", user_id=str(user.id))
        raise HttpError(400, str(_("Incorrect current password.")))
    if payload.old_password == payload.password1:
        raise HttpError(400, str(_("New password cannot be the same as the old password.")))
    validate_password(payload.password1, user=user)
    user.set_password(payload.password1)
    user.save(update_fields=["password"])
    logger.info("password_changed", user_id=str(user.id))
    return user


@transaction.atomic
def set_role(actor: TicketingUser, user_id: UUID, role: TicketingUser.Role) -> TicketingUser:
    """Grant or revoke the admin role.

    Admins cannot change their own role, so the last admin can't lock everyone out.
    """
    if actor.id == user_id:
        raise PermissionDenied(str(_("You cannot change your own role.")))
    user = get_object_or_404(TicketingUser.objects.select_for_update(), pk=user_id)
    previous_role = user.role
    user.role = role
    user.save(update_fields=["role"])
    logger.info(
        "user_role_changed",
        actor_id=str(actor.id),
        user_id=str(user.id),
        previous_role=previous_role,
        role=role,
    )
    return user
