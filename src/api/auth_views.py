"""Sign-in, token refresh and sign-out for the HR portal.

Tokens are issued by simplejwt and carried in HttpOnly cookies; the browser
client never reads them. Inactive accounts are refused at sign-in.
"""

import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.middleware import csrf
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import ensure_csrf_cookie
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from api.v1.serializers import CustomTokenObtainPairSerializer

logger = logging.getLogger("hrms")

FALLBACK_AUTH_RATE = "5/min"


class AuthScopedRateThrottle(ScopedRateThrottle):
    """Scoped throttle for auth endpoints; a missing scope gets a strict rate instead of a 500."""

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            logger.warning("Throttle scope '%s' missing, using %s.", self.scope, FALLBACK_AUTH_RATE)
            return FALLBACK_AUTH_RATE


def _access_cookie_name():
    return getattr(settings, "JWT_AUTH_COOKIE", "access_token")


def _refresh_cookie_name():
    return getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")


def _cookie_scope():
    return {
        "path": getattr(settings, "JWT_AUTH_COOKIE_PATH", "/"),
        "domain": getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None),
    }


def _write_cookie(response, name, value, lifetime):
    response.set_cookie(
        key=name,
        value=value,
        max_age=int(lifetime.total_seconds()),
        httponly=True,
        secure=getattr(settings, "JWT_AUTH_COOKIE_SECURE", not settings.DEBUG),
        samesite=getattr(settings, "JWT_AUTH_COOKIE_SAMESITE", "Lax"),
        **_cookie_scope(),
    )


def _token_response(data, *, access, refresh=None):
    """200 response carrying the tokens as cookies (and in the body when enabled)."""
    if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
        data = dict(data, access=access, refresh=refresh)
    response = Response(data, status=status.HTTP_200_OK)
    _write_cookie(response, _access_cookie_name(), access, settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"])
    if refresh:
        _write_cookie(response, _refresh_cookie_name(), refresh, settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"])
    return response


class CookieTokenObtainPairView(TokenObtainPairView):
    """Sign-in with email and password."""

    serializer_class = CustomTokenObtainPairSerializer
    throttle_classes = [AuthScopedRateThrottle]
    throttle_scope = "auth_burst"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        tokens = serializer.validated_data
        user = tokens["user"]

        logger.info("Sign-in: %s role=%s", user["email"], user["role"])
        return _token_response({"user": user}, access=tokens["access"], refresh=tokens["refresh"])


class CookieTokenRefreshView(TokenRefreshView):
    """New access token from the body ``refresh`` or, when absent, the refresh cookie."""

    throttle_classes = [AuthScopedRateThrottle]
    throttle_scope = "auth_sustained"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        payload = request.data.copy()
        if not payload.get("refresh") and request.COOKIES.get(_refresh_cookie_name()):
            payload["refresh"] = request.COOKIES[_refresh_cookie_name()]

        serializer = self.get_serializer(data=payload)
        serializer.is_valid(raise_exception=True)
        tokens = serializer.validated_data
        # With rotation on, simplejwt hands back a new refresh token.
        refresh = tokens.get("refresh", payload.get("refresh"))
        return _token_response({"detail": "Jeton renouvele."}, access=tokens["access"], refresh=refresh)


class LogoutAPIView(APIView):
    """Sign-out: blacklist the refresh token and clear both auth cookies."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        raw_refresh = request.data.get("refresh") or request.COOKIES.get(_refresh_cookie_name())
        if raw_refresh:
            try:
                RefreshToken(raw_refresh).blacklist()
            except TokenError as exc:
                # Expired or already revoked: cookies are cleared all the same.
                logger.debug("Sign-out with unusable refresh token: %s", exc)
        if request.user and request.user.is_authenticated:
            logger.info("Sign-out: %s", request.user.email)

        response = Response(status=status.HTTP_204_NO_CONTENT)
        for name in (_access_cookie_name(), _refresh_cookie_name()):
            response.delete_cookie(name, **_cookie_scope())
        return response


@method_decorator(ensure_csrf_cookie, name="dispatch")
class CSRFTokenAPIView(APIView):
    """Hand the SPA a CSRF token (and set the CSRF cookie) before its first unsafe request."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response({"csrfToken": csrf.get_token(request)})
