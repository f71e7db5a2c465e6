import pytest

from uniforms.exceptions import AuthenticationError, FormValidationError
from uniforms.services import session as session_service


class TestSignUp:
    def test_mismatched_passwords_never_reach_provider(self, backend, mocker):
        spy = mocker.spy(backend.auth, "sign_up")
        with pytest.raises(FormValidationError, match="Passwords do not match"):
            session_service.sign_up(backend, "new@example.com", "secret123", "secret124")
        spy.assert_not_called()
        assert backend.auth.accounts == {}

    def test_empty_fields(self, backend):
        with pytest.raises(FormValidationError, match="Please fill in all fields"):
            session_service.sign_up(backend, "", "secret123", "secret123")

    def test_creates_account(self, backend):
        session = session_service.sign_up(backend, "new@example.com", "secret123", "secret123")
        assert backend.auth.verify(session.id_token).user_id == session.user_id


class TestSignIn:
    def test_empty_password(self, backend):
        with pytest.raises(FormValidationError):
            session_service.sign_in(backend, "owner@example.com", "")

    def test_provider_rejection(self, backend, owner):
        with pytest.raises(AuthenticationError, match="INVALID_LOGIN_CREDENTIALS"):
            session_service.sign_in(backend, "owner@example.com", "wrong-password")


class TestBearerToken:
    def test_extracts_token(self):
        assert session_service.bearer_token("Bearer abc") == "abc"

    def test_case_insensitive_scheme(self):
        assert session_service.bearer_token("bearer abc") == "abc"

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer ", "abc"])
    def test_rejects_malformed(self, header):
        with pytest.raises(AuthenticationError):
            session_service.bearer_token(header)

    def test_verify_token(self, backend, owner):
        user = session_service.verify_token(backend, f"Bearer {owner.id_token}")
        assert user.user_id == owner.user_id
