"""This module contains the controllers for the authentication app."""

import typing as t

import structlog
from ninja_extra import api_controller, route
from ninja_jwt.controller import TokenObtainPairController
from ninja_jwt.schema import TokenObtainPairInputSchema, TokenObtainPairOutputSchema

from accounts import schema
from accounts.models import TicketingUser
from accounts.service import account as account_service

logger = structlog.get_logger(__name__)


@api_controller("/auth", tags=["Auth"])
class AuthController(TokenObtainPairController):
    @route.post("/token/pair", response=TokenObtainPairOutputSchema, url_name="token_obtain_pair")
    def obtain_token(self, user_token: TokenObtainPairInputSchema) -> TokenObtainPairOutputSchema:
        """Authenticate with email and password to obtain JWT access/refresh tokens.

        The username is the email address used at registration. The access token is sent as
        `Authorization: Bearer <token>`; at checkout it links the purchase to the account.
        """
        user = t.cast(TicketingUser, user_token._user)
        logger.info("user_logged_in", user_id=str(user.id))
        return t.cast(TokenObtainPairOutputSchema, user_token.to_response_schema())  # type: ignore[no-untyped-call]

    @route.post("/register", response={201: schema.TicketingUserSchema}, url_name="register-account")
    def register(self, payload: schema.RegisterUserSchema) -> tuple[int, TicketingUser]:
        """Create a new user account with email and password.

        Passwords need at least 8 characters with an uppercase letter, a lowercase letter,
        a digit and a special character. Returns 400 if the email is already registered.
        """
        return 201, account_service.register_user(payload)
