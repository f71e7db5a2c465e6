from conftest import OWNER_EMAIL, OWNER_PASSWORD


class TestSignUp:
    def test_creates_session(self, api_client):
        resp = api_client.post("/auth/sign-up", json={
            "email": "new@example.com", "password": "secret123", "confirm_password": "secret123",
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["id_token"]
        assert data["redirect_to"] == "/forms"

    def test_password_mismatch(self, api_client, backend):
        resp = api_client.post("/auth/sign-up", json={
            "email": "new@example.com", "password": "secret123", "confirm_password": "other123",
        })
        assert resp.status_code == 400
        assert resp.json() == {"error_code": "validation_error", "message": "Passwords do not match"}
        assert backend.auth.accounts == {}

    def test_provider_message_shown_verbatim(self, api_client, owner):
        resp = api_client.post("/auth/sign-up", json={
            "email": OWNER_EMAIL, "password": OWNER_PASSWORD, "confirm_password": OWNER_PASSWORD,
        })
        assert resp.status_code == 401
        assert resp.json()["message"] == "EMAIL_EXISTS"


class TestSignIn:
    def test_success(self, api_client, owner):
        resp = api_client.post("/auth/sign-in", json={"email": OWNER_EMAIL, "password": OWNER_PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["user_id"] == owner.user_id

    def test_empty_fields(self, api_client):
        resp = api_client.post("/auth/sign-in", json={"email": "", "password": ""})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please fill in all fields"

    def test_wrong_password(self, api_client, owner):
        resp = api_client.post("/auth/sign-in", json={"email": OWNER_EMAIL, "password": "wrong-password"})
        assert resp.status_code == 401
        assert resp.json()["error_code"] == "auth_error"


class TestSession:
    def test_me(self, api_client, owner, auth_headers):
        resp = api_client.get("/auth/me", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"user_id": owner.user_id, "email": OWNER_EMAIL}

    def test_me_without_token(self, api_client):
        assert api_client.get("/auth/me").status_code == 401

    def test_sign_out_ends_session(self, api_client, auth_headers):
        resp = api_client.post("/auth/sign-out", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"signed_out": True, "redirect_to": "/"}
        assert api_client.get("/auth/me", headers=auth_headers).status_code == 401
