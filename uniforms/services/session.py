"""Sign-up, sign-in and sign-out."""

import logging

from uniforms.backend import BackendClient
from uniforms.exceptions import AuthenticationError, FormValidationError
from uniforms.models.auth import AuthSession, AuthUser

logger = logging.getLogger(__name__)


def _require_fields(email: str, password: str) -> None:
    if not email or not password:
        raise FormValidationError("Please fill in all fields")


def sign_in(backend: BackendClient, email: str, password: str) -> AuthSession:
    _require_fields(email, password)
    return backend.auth.sign_in(email, password)


def sign_up(backend: BackendClient, email: str, password: str, confirm_password: str) -> AuthSession:
    _require_fields(email, password)
    if password != confirm_password:
        raise FormValidationError("Passwords do not match")
    session = backend.auth.sign_up(email, password)
    logger.info("Registered user %s", session.user_id)
    return session


def sign_out(backend: BackendClient, id_token: str) -> None:
    backend.auth.sign_out(id_token)


def bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthenticationError("Sign in required: missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization header must be 'Bearer <id_token>'")
    return token.strip()


def verify_token(backend: BackendClient, authorization: str | None) -> AuthUser:
    return backend.auth.verify(bearer_token(authorization))
