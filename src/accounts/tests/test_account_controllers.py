"""Integration tests for the auth, account and user admin controllers."""

import orjson
import pytest
from django.test.client import Client
from django.urls import reverse

from accounts import schema
from accounts.models import TicketingUser
from conftest import TicketingUserFactory

pytestmark = pytest.mark.django_db


def test_register_success(client: Client, valid_register_payload: schema.RegisterUserSchema) -> None:
    """A new account gets the default role and a usable password."""
    url = reverse("api:register-account")
    response = client.post(url, data=valid_register_payload.model_dump_json(), content_type="application/json")

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new.customer@example.com"
    assert data["role"] == "user"
    assert data["is_admin"] is False
    user = TicketingUser.objects.get(email="new.customer@example.com")
    assert user.username == user.email
    assert user.check_password("Str0ng!Password")


def test_register_duplicate_email(
    client: Client, user_factory: TicketingUserFactory, valid_register_payload: schema.RegisterUserSchema
) -> None:
    """Emails are unique regardless of case."""
    user_factory(email="new.customer@example.com")
    payload = valid_register_payload.model_copy(update={"email": "New.Customer@example.com"})

    response = client.post(
        reverse("api:register-account"), data=payload.model_dump_json(), content_type="application/json"
    )

    assert response.status_code == 400
    assert TicketingUser.objects.count() == 1


def test_register_password_mismatch(client: Client) -> None:
    payload = {
        "email": "a@example.com",
        "first_name": "A",
        "last_name": "B",
        "password1": "Str0ng!Password",
        "password2": "Str0ng!Passw0rd",
    }

    response = client.post(reverse("api:register-account"), data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 422
    assert "Passwords do not match" in response.json()["detail"][0]["msg"]


@pytest.mark.parametrize("password", ["alllowercase1!", "ALLUPPERCASE1!", "NoDigitsHere!", "NoSpecial123"])
def test_register_weak_password(client: Client, password: str) -> None:
    payload = {
        "email": "weak@example.com",
        "first_name": "Weak",
        "last_name": "Password",
        "password1": password,
        "password2": password,
    }

    response = client.post(reverse("api:register-account"), data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 400
    assert not TicketingUser.objects.filter(email="weak@example.com").exists()


def test_obtain_token_pair(client: Client, user: TicketingUser) -> None:
    """The email is the username."""
    payload = {"username": user.email, "password": "Str0ng!Password"}

    response = client.post(reverse("api:token_obtain_pair"), data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 200
    assert {"access", "refresh"} <= set(response.json())


def test_obtain_token_pair_wrong_password(client: Client, user: TicketingUser) -> None:
    payload = {"username": user.email, "password": "wrong"}

    response = client.post(reverse("api:token_obtain_pair"), data=orjson.dumps(payload), content_type="application/json")

    assert response.status_code == 401


def test_me(user: TicketingUser, user_client: Client) -> None:
    response = user_client.get(reverse("api:me"))

    assert response.status_code == 200
    assert response.json()["id"] == str(user.id)
    assert response.json()["display_name"] == f"{user.first_name} {user.last_name}"


def test_me_requires_token(client: Client) -> None:
    assert client.get(reverse("api:me")).status_code == 401


class TestChangePassword:
    url = "api:change-password"

    def _change(self, client: Client, old: str, new: str) -> int:
        payload = {"old_password": old, "password1": new, "password2": new}
        response = client.post(reverse(self.url), data=orjson.dumps(payload), content_type="application/json")
        return response.status_code

    def test_success(self, user: TicketingUser, user_client: Client) -> None:
        assert self._change(user_client, "Str0ng!Password", "N3w!Password") == 200

        user.refresh_from_db()
        assert user.check_password("N3w!Password")

    def test_wrong_current_password(self, user: TicketingUser, user_client: Client) -> None:
        assert self._change(user_client, "Wr0ng!Password", "N3w!Password") == 400

        user.refresh_from_db()
        assert user.check_password("Str0ng!Password")

    def test_same_password(self, user_client: Client) -> None:
        assert self._change(user_client, "Str0ng!Password", "Str0ng!Password") == 400

    def test_weak_new_password(self, user_client: Client) -> None:
        assert self._change(user_client, "Str0ng!Password", "weakpassword") == 400


class TestUserAdmin:
    def test_list_users_is_paginated_and_searchable(
        self, admin_client: Client, user_factory: TicketingUserFactory
    ) -> None:
        user_factory(email="findme@example.com")
        user_factory(email="other@example.com")

        response = admin_client.get(reverse("api:list_users"), {"search": "findme"})

        assert response.status_code == 200
        assert response.json()["count"] == 1
        assert response.json()["results"][0]["email"] == "findme@example.com"

    def test_customers_cannot_list_users(self, user_client: Client) -> None:
        assert user_client.get(reverse("api:list_users")).status_code == 403

    def test_grant_admin_role(self, admin_client: Client, user: TicketingUser) -> None:
        url = reverse("api:set_user_role", kwargs={"user_id": user.id})

        response = admin_client.patch(url, data=orjson.dumps({"role": "admin"}), content_type="application/json")

        assert response.status_code == 200
        user.refresh_from_db()
        assert user.is_admin

    def test_cannot_change_own_role(self, admin_client: Client, admin_user: TicketingUser) -> None:
        url = reverse("api:set_user_role", kwargs={"user_id": admin_user.id})

        response = admin_client.patch(url, data=orjson.dumps({"role": "user"}), content_type="application/json")

        assert response.status_code == 403
        admin_user.refresh_from_db()
        assert admin_user.role == TicketingUser.Role.ADMIN

    def test_unknown_user(self, admin_client: Client) -> None:
        url = reverse("api:set_user_role", kwargs={"user_id": "00000000-0000-4000-8000-000000000000"})

        response = admin_client.patch(url, data=orjson.dumps({"role": "admin"}), content_type="application/json")

        assert response.status_code == 404
