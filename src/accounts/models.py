import re
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class TicketingUser(AbstractUser):
    """A registered account.

    The username is the email address. Tickets keep a weak reference to the buyer,
    so deleting an account never deletes tickets.
    """

    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER, db_index=True)

    objects = UserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["email"]

    @property
    def is_admin(self) -> bool:
        """Admins manage submissions, sales, refunds and check-in."""
        return self.role == self.Role.ADMIN or self.is_superuser

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()
