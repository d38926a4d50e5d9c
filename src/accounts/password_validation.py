"""Password rules for ticketing accounts."""

import re
import typing as t

from django.contrib.auth.password_validation import validate_password as _default_validate_password
from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _
from django.utils.translation import gettext_lazy
from ninja.errors import HttpError

from accounts.models import TicketingUser

SPECIAL_CHARACTERS = r"[!@#$%^&*(),.?\":{}|<>\-\[\]=_+~;'/\\`]"

# (pattern the password must match, message, code), checked in order
CHARACTER_RULES: tuple[tuple[str, t.Any, str], ...] = (
    (r"[A-Z]", gettext_lazy("Password must contain at least one uppercase letter."), "password_no_upper"),
    (r"[a-z]", gettext_lazy("Password must contain at least one lowercase letter."), "password_no_lower"),
    (r"\d", gettext_lazy("Password must contain at least one digit."), "password_no_digit"),
    (SPECIAL_CHARACTERS, gettext_lazy("Password must contain at least one special character."), "password_no_special"),
)

# shorter mailbox names match too many ordinary words
MIN_MAILBOX_LENGTH = 4


def validate_password(password: str, user: TicketingUser | None = None) -> None:
    """Run the configured validators and report the first failure as a 400."""
    try:
        _default_validate_password(password, user=user)
    except ValidationError as e:
        raise HttpError(400, e.messages[0])


class ComplexPasswordValidator:
    """Length and character class rules, plus no reuse of the account's mailbox name."""

    def __init__(self, min_length: int = 8) -> None:
        self.min_length = min_length

    def validate(self, password: str, user: TicketingUser | None = None) -> None:
        if len(password) < self.min_length:
            raise ValidationError(
                _("Password must be at least %(min_length)d characters long.") % {"min_length": self.min_length},
                code="password_too_short",
            )
        for pattern, message, code in CHARACTER_RULES:
            if not re.search(pattern, password):
                raise ValidationError(message, code=code)
        mailbox = self._mailbox(user)
        if mailbox and mailbox in password.lower():
            raise ValidationError(_("Password must not contain your email address."), code="password_has_email")

    @staticmethod
    def _mailbox(user: TicketingUser | None) -> str | None:
        email = getattr(user, "email", "") or ""
        mailbox = email.partition("@")[0].lower()
        return mailbox if len(mailbox) >= MIN_MAILBOX_LENGTH else None

    def get_help_text(self) -> str:
        return _(
            "Your password must be at least %(min_length)d characters long, contain an uppercase letter, "
            "a lowercase letter, a digit and a special character, and must not contain your email address."
        ) % {"min_length": self.min_length}
