"""Integration tests for the auth, post-ad and admin site routes."""

import re
from urllib.parse import parse_qs, urlsplit

import pytest

from yalla_souq.core.exceptions import AuthProviderError

DEMO_LOGIN = {"email": "admin@yallasouq.ps", "password": "123456"}
ERROR_ID = re.compile(r"^ERR_\d+_[0-9a-z]{9}$")


def _location(response) -> tuple[str, dict[str, list[str]]]:
    parts = urlsplit(response.headers["location"])
    return parts.path, parse_qs(parts.query)


def _signup_form(**overrides) -> dict:
    form = {
        "first_name": "ليلى",
        "last_name": "حداد",
        "email": "new@yallasouq.ps",
        "phone": "0599123456",
        "password": "secret1",
        "confirm_password": "secret1",
        "accept_terms": True,
    }
    form.update(overrides)
    return form


@pytest.fixture
def logged_in(client):
    response = client.post("/auth/login", json=DEMO_LOGIN)
    assert response.status_code == 200
    return client


class TestLogin:
    """Integration tests for login and logout."""

    def test_login_success(self, client):
        response = client.post("/auth/login", json={**DEMO_LOGIN, "remember_me": True})
        body = response.json()

        assert response.status_code == 200
        assert body["success"] is True
        assert body["redirect_to"] == "/"
        assert body["state"]["is_authenticated"] is True

    def test_field_errors(self, client):
        response = client.post("/auth/login", json={"email": "not-an-email", "password": "123"})
        error = response.json()["error"]

        assert response.status_code == 422
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "يرجى تصحيح الأخطاء في النموذج"
        assert set(error["details"]["fields"]) == {"email", "password"}
        assert ERROR_ID.match(error["error_id"])

    def test_wrong_credentials_then_lockout(self, client):
        statuses = [
            client.post("/auth/login", json={"email": "nobody@yallasouq.ps", "password": "123456"}).status_code
            for _ in range(5)
        ]
        blocked = client.post("/auth/login", json=DEMO_LOGIN)

        assert statuses == [401, 401, 401, 401, 429]
        assert blocked.status_code == 429
        assert blocked.json()["error"]["message"] == "تم حظر المحاولات لمدة مؤقتة، يرجى المحاولة لاحقاً"

    def test_state_and_logout(self, logged_in):
        state = logged_in.get("/auth/state").json()

        assert state["display_name"] == "مستخدم تجريبي"
        assert state["permissions"] == {"post_ad": True, "business_features": False, "admin_panel": True}

        logged_in.post("/auth/logout")
        after = logged_in.get("/auth/state").json()

        assert after["state"]["is_authenticated"] is False
        assert after["display_name"] == ""

    def test_reset_password(self, client):
        response = client.post("/auth/reset-password", json={"email": "user@yallasouq.ps"})

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestSignup:
    """Integration tests for signup and email verification."""

    def test_signup_page(self, client):
        assert client.get("/auth/signup").json() == {"email_confirmed": False}
        assert client.get("/auth/signup", params={"email_confirmed": "true"}).json() == {"email_confirmed": True}

    def test_signup_page_redirects_signed_in_users(self, logged_in):
        response = logged_in.get("/auth/signup", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/dashboard"

    def test_login_link_keeps_redirect(self, client):
        with_redirect = client.get("/auth/signup/login-link", params={"redirect": "/post-ad"}).json()
        plain = client.get("/auth/signup/login-link").json()

        assert with_redirect == {"href": "/auth/login?redirect=%2Fpost-ad"}
        assert plain == {"href": "/auth/login"}

    def test_signup_then_verify(self, client, clock):
        response = client.post("/auth/signup", json=_signup_form())
        body = response.json()

        assert response.status_code == 200
        assert body["success"] is True
        assert body["redirect_to"] == "/auth/verify-email?email=new%40yallasouq.ps"

        user_id = f"mock-user-{int(clock().timestamp() * 1000)}"
        verified = client.get(
            "/auth/verify-email",
            params={"token_hash": f"mock-otp-{user_id}", "type": "signup"},
        ).json()

        assert verified["status"] == "verified"
        path, query = urlsplit(verified["redirect_to"]).path, parse_qs(urlsplit(verified["redirect_to"]).query)
        assert path == "/auth/login"
        assert query["message"] == ["تم تأكيد البريد الإلكتروني، يمكنك تسجيل الدخول الآن"]

    def test_signup_validation(self, client):
        response = client.post("/auth/signup", json=_signup_form(confirm_password="other1", phone="12345"))

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert set(response.json()["error"]["details"]["fields"]) == {"confirm_password", "phone"}

    def test_signup_requires_terms(self, client):
        response = client.post("/auth/signup", json=_signup_form(accept_terms=False))

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "يجب قبول الشروط والأحكام للمتابعة"

    def test_signup_existing_email(self, client):
        response = client.post("/auth/signup", json=_signup_form(email="user@yallasouq.ps"))

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "هذا البريد الإلكتروني مسجل مسبقاً"

    def test_verify_email_states(self, client):
        sent = client.get("/auth/verify-email", params={"email": "new@yallasouq.ps"})
        invalid = client.get("/auth/verify-email")
        stale = client.get("/auth/verify-email", params={"token_hash": "stale", "type": "signup"})

        assert sent.json()["status"] == "link_sent"
        assert invalid.status_code == 400
        assert invalid.json()["message"] == "رابط التأكيد غير صالح"
        assert stale.status_code == 400
        assert stale.json()["message"] == "Token has expired or is invalid"


class TestAuthCallback:
    """Integration tests for the auth callback redirects."""

    def test_no_session(self, client):
        response = client.get("/auth/callback", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/auth/login"

    def test_with_session(self, logged_in):
        response = logged_in.get("/auth/callback", follow_redirects=False)
        path, query = _location(response)

        assert path == "/"
        assert query == {"success": ["تم تسجيل الدخول بنجاح"]}

    def test_provider_error(self, client, mock_provider, monkeypatch):
        async def failing_session():
            raise AuthProviderError("Invalid Refresh Token", status_code=400)

        monkeypatch.setattr(mock_provider, "get_session", failing_session)
        response = client.get("/auth/callback", follow_redirects=False)
        path, query = _location(response)

        assert path == "/auth/login"
        assert query == {"error": ["حدث خطأ أثناء تسجيل الدخول"]}

    def test_unexpected_error(self, client, mock_provider, monkeypatch):
        async def failing_session():
            raise RuntimeError("cookie store unavailable")

        monkeypatch.setattr(mock_provider, "get_session", failing_session)
        response = client.get("/auth/callback", follow_redirects=False)
        path, query = _location(response)

        assert path == "/auth/login"
        assert query == {"error": ["حدث خطأ غير متوقع"]}


class TestPostAd:
    """Integration tests for the ad type step of the post-ad wizard."""

    def test_anonymous_visitor_is_sent_to_login(self, client):
        response = client.get("/post-ad/category/vehicles", follow_redirects=False)
        path, query = _location(response)

        assert response.status_code == 302
        assert path == "/auth/login"
        assert query == {"redirect": ["/post-ad"]}

    def test_category_page(self, logged_in):
        body = logged_in.get("/post-ad/category/vehicles").json()

        assert body["category"]["slug"] == "vehicles"
        assert [option["type"] for option in body["ad_types"]] == ["sell", "rent", "buy", "service"]

    def test_unknown_category(self, logged_in):
        response = logged_in.get("/post-ad/category/spaceships")

        assert response.status_code == 404
        assert response.json()["detail"] == "الفئة غير موجودة"

    def test_select_with_sub_type(self, logged_in):
        response = logged_in.post(
            "/post-ad/category/vehicles/select",
            json={"type": "rent", "sub_type": "car_rent"},
        )

        assert response.json() == {"redirect_to": "/post-ad/details?category=1&type=rent&subType=car_rent"}

    def test_select_without_sub_type(self, logged_in):
        response = logged_in.post("/post-ad/category/vehicles/select", json={"type": "buy"})

        assert response.json() == {"redirect_to": "/post-ad/details?category=1&type=buy"}

    @pytest.mark.parametrize(
        "selection",
        [{"type": "exchange"}, {"type": "rent", "sub_type": "car_sell"}],
    )
    def test_invalid_selection(self, logged_in, selection):
        response = logged_in.post("/post-ad/category/vehicles/select", json=selection)

        assert response.status_code == 422


class TestMockDataAdmin:
    """Integration tests for the mock-data admin page."""

    def test_dashboard(self, client):
        body = client.get("/admin/mock-data").json()

        assert body["total_ads"] == 6
        assert len(body["ads"]) == 6
        assert len(body["categories"]) == 10
        assert body["stats"]["total_users"] == 4
        assert body["errors"] == []

    def test_create_test_ad(self, client):
        response = client.post("/admin/mock-data/test-ad")
        ad = response.json()

        assert response.status_code == 201
        assert ad["title"].startswith("إعلان تجريبي")
        assert ad["category_id"] == "3"
        assert 100 <= ad["price"] <= 1099
        assert client.get("/admin/mock-data").json()["total_ads"] == 7

    def test_toggle_favorite(self, client):
        response = client.post("/admin/mock-data/ads/2/favorite")

        assert response.json() == {"ad_id": "2", "is_favorited": False}

    def test_clear_logs(self, client, app_logger):
        app_logger.info("marker")
        response = client.delete("/admin/mock-data/logs")
        messages = [entry.message for entry in app_logger.get_recent_logs(100)]

        assert response.status_code == 204
        assert "marker" not in messages
