"""Firebase Authentication (email/password).

Sign-up and sign-in go through the Identity Toolkit REST API, which the Admin
SDK does not cover. ID tokens are verified with ``firebase_admin.auth``;
sign-out revokes the user's refresh tokens, and verification checks for
revocation.
"""

import logging

import requests
from firebase_admin import auth
from firebase_admin import exceptions as firebase_exceptions

from uniforms.exceptions import AuthenticationError, IntegrationError, RateLimitError
from uniforms.http_client import DEFAULT_TIMEOUT, get_session
from uniforms.models.auth import AuthSession, AuthUser
from uniforms.services.firebase_app import get_app

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_BASE = "https://identitytoolkit.googleapis.com/v1"


def _handle_response(resp: requests.Response) -> dict:
    if resp.status_code == 429:
        raise RateLimitError("Firebase Auth rate limit exceeded. Try again shortly.")
    if resp.status_code >= 500:
        raise IntegrationError(f"Firebase Auth error (HTTP {resp.status_code})")
    try:
        data = resp.json()
    except ValueError as e:
        raise IntegrationError(f"Firebase Auth returned a non-JSON reply (HTTP {resp.status_code})") from e
    if resp.status_code >= 400:
        message = data.get("error", {}).get("message", f"HTTP {resp.status_code}")
        if message.startswith("TOO_MANY_ATTEMPTS_TRY_LATER"):
            raise RateLimitError(message)
        raise AuthenticationError(message)
    return data


class FirebaseAuthProvider:
    def __init__(self, api_key: str, project_id: str, credentials_file):
        self.api_key = api_key
        self.project_id = project_id
        self.credentials_file = credentials_file

    @property
    def app(self):
        return get_app(self.credentials_file, self.project_id)

    def _call(self, method: str, payload: dict) -> dict:
        if not self.api_key:
            raise AuthenticationError(
                "Firebase API key not configured. Set FIREBASE_API_KEY in .env"
            )
        try:
            resp = get_session().post(
                f"{IDENTITY_TOOLKIT_BASE}/accounts:{method}",
                params={"key": self.api_key},
                json=payload,
                timeout=DEFAULT_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.warning("Identity Toolkit %s failed: %s", method, e)
            raise IntegrationError(f"Could not reach Firebase Auth: {e}") from e
        return _handle_response(resp)

    def _session(self, data: dict) -> AuthSession:
        return AuthSession(
            user_id=data["localId"],
            email=data.get("email"),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken"),
            expires_in=int(data["expiresIn"]) if data.get("expiresIn") else None,
        )

    def sign_up(self, email: str, password: str) -> AuthSession:
        data = self._call("signUp", {"email": email, "password": password, "returnSecureToken": True})
        return self._session(data)

    def sign_in(self, email: str, password: str) -> AuthSession:
        data = self._call(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return self._session(data)

    def _decode(self, id_token: str) -> dict:
        try:
            return auth.verify_id_token(id_token, app=self.app, check_revoked=True)
        except auth.RevokedIdTokenError as e:
            raise AuthenticationError("TOKEN_REVOKED") from e
        except auth.ExpiredIdTokenError as e:
            raise AuthenticationError("TOKEN_EXPIRED") from e
        except auth.UserDisabledError as e:
            raise AuthenticationError("USER_DISABLED") from e
        except (auth.InvalidIdTokenError, ValueError) as e:
            raise AuthenticationError("INVALID_ID_TOKEN") from e
        except auth.CertificateFetchError as e:
            logger.warning("Could not fetch Firebase token certificates: %s", e)
            raise IntegrationError(f"Could not verify token: {e}") from e
        except firebase_exceptions.FirebaseError as e:
            raise IntegrationError(f"Firebase Auth error: {e}") from e

    def verify(self, id_token: str) -> AuthUser:
        claims = self._decode(id_token)
        return AuthUser(user_id=claims["uid"], email=claims.get("email"))

    def sign_out(self, id_token: str) -> None:
        """Revoke every refresh token of the token's user, ending all of their sessions."""
        uid = self._decode(id_token)["uid"]
        try:
            auth.revoke_refresh_tokens(uid, app=self.app)
        except firebase_exceptions.FirebaseError as e:
            raise IntegrationError(f"Could not sign out: {e}") from e
        logger.info("Revoked refresh tokens for user %s", uid)
