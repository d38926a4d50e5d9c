import typing as t

import structlog
from django.contrib.auth.models import AnonymousUser
from django.http import HttpRequest
from ninja_jwt.authentication import JWTAuth
from ninja_jwt.exceptions import AuthenticationFailed

logger = structlog.get_logger(__name__)


class OptionalAuth(JWTAuth):
    """Optional JWT authentication.

    Allows endpoints to work with or without authentication:
    - If a valid JWT token is present: authenticates the user
    - Otherwise (no header, another scheme, an expired or garbled token): sets
      request.user to AnonymousUser and continues

    Used by the checkout, where a bearer token links the purchase to an account and
    anything else makes it a guest purchase.
    """

    def __call__(self, request: HttpRequest) -> t.Any | None:
        """Overrides JWTAuth __call__ to provide optional auth."""
        auth_value = request.headers.get(self.header)
        if not auth_value:
            return self._as_guest(request)
        parts = auth_value.split(" ")

        if parts[0].lower() != self.openapi_scheme:
            logger.warning("optional_auth_unexpected_scheme", scheme=parts[0], path=request.path)
            return self._as_guest(request)
        token = " ".join(parts[1:])
        try:
            return self.authenticate(request, token)
        except AuthenticationFailed:
            logger.warning("optional_auth_invalid_token", path=request.path)
            return self._as_guest(request)

    @staticmethod
    def _as_guest(request: HttpRequest) -> AnonymousUser:
        request.user = AnonymousUser()
        return request.user
