"""Tests for PIN login and bearer token authentication."""
from rest_framework_simplejwt.tokens import AccessToken

PIN = "1234"

LOGIN_URL = "/api/v1/auth/login/"


class TestLogin:
    """POST /api/v1/auth/login/"""

    def test_login_success(self, api_client, class_a_user):
        resp = api_client.post(LOGIN_URL, {"memberId": str(class_a_user.pk), "pin": PIN}, format="json")
        assert resp.status_code == 200
        assert resp.data["member"] == {
            "id": str(class_a_user.pk),
            "name": "Class A User",
            "authRole": "class_a",
            "color": "#c9a84c",
        }

        token = AccessToken(resp.data["token"])
        assert token["sub"] == str(class_a_user.pk)
        assert token["name"] == "Class A User"
        assert token["role"] == "class_a"

    def test_numeric_pin(self, api_client, class_a_user):
        resp = api_client.post(LOGIN_URL, {"memberId": str(class_a_user.pk), "pin": int(PIN)}, format="json")
        assert resp.status_code == 200

    def test_wrong_pin(self, api_client, class_a_user):
        resp = api_client.post(LOGIN_URL, {"memberId": str(class_a_user.pk), "pin": "0000"}, format="json")
        assert resp.status_code == 401
        assert resp.data == {"error": "Incorrect PIN"}
        assert resp["WWW-Authenticate"].startswith("Bearer")

    def test_unknown_member(self, api_client, db):
        resp = api_client.post(
            LOGIN_URL,
            {"memberId": "00000000-0000-0000-0000-000000000000", "pin": PIN},
            format="json",
        )
        assert resp.status_code == 401
        assert resp.data == {"error": "Member not found"}

    def test_malformed_member_id(self, api_client, db):
        resp = api_client.post(LOGIN_URL, {"memberId": "not-a-uuid", "pin": PIN}, format="json")
        assert resp.status_code == 401

    def test_inactive_member(self, api_client, class_a_user):
        class_a_user.is_active = False
        class_a_user.save()
        resp = api_client.post(LOGIN_URL, {"memberId": str(class_a_user.pk), "pin": PIN}, format="json")
        assert resp.status_code == 403
        assert resp.data == {"error": "Account is inactive"}

    def test_missing_fields(self, api_client, db):
        resp = api_client.post(LOGIN_URL, {"memberId": ""}, format="json")
        assert resp.status_code == 400
        assert resp.data == {"error": "memberId and pin required"}


class TestBearerToken:

    def _login(self, api_client, member):
        resp = api_client.post(LOGIN_URL, {"memberId": str(member.pk), "pin": PIN}, format="json")
        return resp.data["token"]

    def test_token_grants_access(self, api_client, class_b_user):
        token = self._login(api_client, class_b_user)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        resp = api_client.get("/api/v1/bootstrap/")
        assert resp.status_code == 200

    def test_invalid_token(self, api_client, db):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        resp = api_client.get("/api/v1/bootstrap/")
        assert resp.status_code == 401
        assert "error" in resp.data

    def test_deactivated_member_loses_access(self, api_client, class_b_user):
        token = self._login(api_client, class_b_user)
        class_b_user.is_active = False
        class_b_user.save()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        resp = api_client.get("/api/v1/bootstrap/")
        assert resp.status_code == 401

    def test_role_is_read_from_the_roster(self, api_client, admin_user):
        token = self._login(api_client, admin_user)
        admin_user.auth_role = "class_b"
        admin_user.save()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        resp = api_client.get("/api/v1/audit-log/")
        assert resp.status_code == 403
