"""Project wide fixtures: users, authenticated clients and Celery in eager mode."""

import secrets
import string
import typing as t

import faker
import pytest
from django.test.client import Client
from ninja_jwt.tokens import RefreshToken

from accounts.models import TicketingUser


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


class TicketingUserFactory:
    """Factory for creating TicketingUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> TicketingUser:
        email = kwargs.pop("email", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)) + "@user.test")
        password = kwargs.pop("password", "Str0ng!Password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return TicketingUser.objects.create_user(
            username=kwargs.pop("username", email),
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> TicketingUser:
        return self.create_user(**kwargs)


@pytest.fixture
def user_factory() -> TicketingUserFactory:
    return TicketingUserFactory()


@pytest.fixture
def user(user_factory: TicketingUserFactory) -> TicketingUser:
    """A customer account."""
    return user_factory()


@pytest.fixture
def admin_user(user_factory: TicketingUserFactory) -> TicketingUser:
    """An account holding the marketplace admin role."""
    return user_factory(role=TicketingUser.Role.ADMIN)


@pytest.fixture
def superuser(user_factory: TicketingUserFactory) -> TicketingUser:
    """A superuser."""
    return user_factory(is_superuser=True, is_staff=True)


def client_for(user: TicketingUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")  # type: ignore[attr-defined]


@pytest.fixture
def user_client(user: TicketingUser) -> Client:
    return client_for(user)


@pytest.fixture
def admin_client(admin_user: TicketingUser) -> Client:
    """Overrides pytest-django's session based admin client with a JWT one."""
    return client_for(admin_user)
