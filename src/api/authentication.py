"""JWT authentication for the HR portal API."""

from django.conf import settings
from django.middleware.csrf import CsrfViewMiddleware
from rest_framework import exceptions
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError


def _noop_view(request):
    return None


class CookieJWTAuthentication(JWTAuthentication):
    """Accept the access token from the ``Authorization`` header or the HttpOnly cookie.

    A bad header token is a hard 401. A stale cookie leaves the request
    anonymous so ``AllowAny`` endpoints (refresh, sign-out) keep working.
    Unsafe requests authenticated by cookie must carry a valid CSRF token.
    """

    def authenticate(self, request: Request):
        header_result = self._authenticate_header(request)
        if header_result is not None:
            return header_result
        return self._authenticate_cookie(request)

    def _authenticate_header(self, request: Request):
        header = self.get_header(request)
        if header is None:
            return None
        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None
        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    def _authenticate_cookie(self, request: Request):
        raw_token = request.COOKIES.get(getattr(settings, "JWT_AUTH_COOKIE", "access_token"))
        if not raw_token:
            return None
        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, TokenError):
            return None

        user = self.get_user(validated_token)
        self._check_csrf(request)
        return user, validated_token

    def _check_csrf(self, request: Request) -> None:
        django_request = request._request
        check = CsrfViewMiddleware(_noop_view)
        check.process_request(django_request)
        reason = check.process_view(django_request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF invalide : {reason}")
