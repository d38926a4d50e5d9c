import pytest

from accounts import schema


@pytest.fixture
def valid_register_payload() -> schema.RegisterUserSchema:
    return schema.RegisterUserSchema(
        email="new.customer@example.com",
        first_name="New",
        last_name="Customer",
        password1="Str0ng!Password",
        password2="Str0ng!Password",
    )
