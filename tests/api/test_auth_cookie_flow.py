import json

import pytest
from django.conf import settings
from django.test import Client
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken


def _login_via_api(client, email: str, password: str):
    return client.post(
        "/api/v1/auth/token/",
        data=json.dumps({"email": email, "password": password}),
        content_type="application/json",
    )


@pytest.mark.django_db
def test_auth_csrf_endpoint_returns_token(client):
    response = client.get("/api/v1/auth/csrf/")

    assert response.status_code == 200
    payload = response.json()
    assert payload["csrfToken"]


@pytest.mark.django_db
def test_auth_login_sets_http_only_jwt_cookies(client, employee_user, employee):
    response = _login_via_api(client, employee_user.email, "testpass123")

    assert response.status_code == 200
    payload = response.json()
    assert payload["user"]["email"] == employee_user.email
    assert payload["user"]["role"] == "employee"
    assert payload["user"]["employee"]["employee_code"] == employee.employee_code
    assert "access" not in payload
    assert "refresh" not in payload

    access_cookie_name = settings.JWT_AUTH_COOKIE
    refresh_cookie_name = settings.JWT_AUTH_REFRESH_COOKIE
    assert response.cookies[access_cookie_name]["httponly"]
    assert response.cookies[refresh_cookie_name]["httponly"]


@pytest.mark.django_db
def test_login_with_wrong_password_is_rejected(client, admin_user):
    response = _login_via_api(client, admin_user.email, "wrong-password")

    assert response.status_code == 401
    assert settings.JWT_AUTH_COOKIE not in response.cookies


@pytest.mark.django_db
def test_inactive_account_cannot_sign_in(client, employee_user):
    employee_user.is_active = False
    employee_user.save(update_fields=["is_active"])

    response = _login_via_api(client, employee_user.email, "testpass123")
    assert response.status_code == 401


@pytest.mark.django_db
def test_cookie_session_reaches_me_endpoint(client, admin_user):
    _login_via_api(client, admin_user.email, "testpass123")

    response = client.get("/api/v1/auth/me/")

    assert response.status_code == 200
    assert response.json()["is_admin"] is True


@pytest.mark.django_db
def test_cookie_authenticated_post_requires_csrf_header(admin_user):
    strict_client = Client(enforce_csrf_checks=True)
    login_response = _login_via_api(strict_client, admin_user.email, "testpass123")
    assert login_response.status_code == 200

    # Without CSRF header -> denied for cookie-authenticated unsafe method.
    response_no_csrf = strict_client.post(
        "/api/v1/auth/password/change/",
        data=json.dumps({"old_password": "testpass123", "new_password": "Newpass123!"}),
        content_type="application/json",
    )
    assert response_no_csrf.status_code == 403

    csrf_token = strict_client.get("/api/v1/auth/csrf/").json()["csrfToken"]

    response_with_csrf = strict_client.post(
        "/api/v1/auth/password/change/",
        data=json.dumps({"old_password": "testpass123", "new_password": "Newpass123!"}),
        content_type="application/json",
        HTTP_X_CSRFTOKEN=csrf_token,
    )
    assert response_with_csrf.status_code == 200
    admin_user.refresh_from_db()
    assert admin_user.check_password("Newpass123!")


@pytest.mark.django_db
def test_refresh_uses_refresh_cookie_when_body_missing(client, admin_user):
    login_response = _login_via_api(client, admin_user.email, "testpass123")
    assert login_response.status_code == 200

    refresh_response = client.post(
        "/api/v1/auth/token/refresh/",
        data=json.dumps({}),
        content_type="application/json",
    )

    assert refresh_response.status_code == 200
    assert settings.JWT_AUTH_COOKIE in refresh_response.cookies


@pytest.mark.django_db
def test_logout_clears_cookies_and_blacklists_refresh(client, admin_user):
    _login_via_api(client, admin_user.email, "testpass123")

    response = client.post("/api/v1/auth/logout/")

    assert response.status_code == 204
    assert response.cookies[settings.JWT_AUTH_COOKIE].value == ""
    assert response.cookies[settings.JWT_AUTH_REFRESH_COOKIE].value == ""
    assert BlacklistedToken.objects.count() == 1
