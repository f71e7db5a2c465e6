"""
Auth provider interface and an in-memory implementation.

Rejections raise AuthenticationError carrying the provider's own message,
which the API passes through verbatim. The in-memory provider mirrors
Firebase's message strings.
"""

import hashlib
import secrets
import threading
from typing import Protocol

from uniforms.exceptions import AuthenticationError
from uniforms.models.auth import AuthSession, AuthUser

MIN_PASSWORD_LENGTH = 6


class AuthProvider(Protocol):
    def sign_up(self, email: str, password: str) -> AuthSession:
        ...

    def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    def verify(self, id_token: str) -> AuthUser:
        ...

    def sign_out(self, id_token: str) -> None:
        ...


def _hash_password(salt: str, password: str) -> str:
    return hashlib.sha256(f"{salt}:{password}".encode("utf-8")).hexdigest()


class InMemoryAuthProvider:
    """Email/password accounts kept in process memory."""

    def __init__(self):
        self.accounts: dict[str, tuple[str, str, str]] = {}  # email -> (uid, salt, hash)
        self.sessions: dict[str, str] = {}  # id_token -> uid
        self._lock = threading.Lock()

    def _open_session(self, uid: str, email: str) -> AuthSession:
        token = secrets.token_urlsafe(32)
        self.sessions[token] = uid
        return AuthSession(
            user_id=uid,
            email=email,
            id_token=token,
            refresh_token=secrets.token_urlsafe(32),
            expires_in=3600,
        )

    def sign_up(self, email: str, password: str) -> AuthSession:
        email = email.strip().lower()
        with self._lock:
            if email in self.accounts:
                raise AuthenticationError("EMAIL_EXISTS")
            if len(password) < MIN_PASSWORD_LENGTH:
                raise AuthenticationError("WEAK_PASSWORD : Password should be at least 6 characters")
            uid = secrets.token_hex(14)
            salt = secrets.token_hex(8)
            self.accounts[email] = (uid, salt, _hash_password(salt, password))
            return self._open_session(uid, email)

    def sign_in(self, email: str, password: str) -> AuthSession:
        email = email.strip().lower()
        with self._lock:
            account = self.accounts.get(email)
            if account is None or _hash_password(account[1], password) != account[2]:
                raise AuthenticationError("INVALID_LOGIN_CREDENTIALS")
            return self._open_session(account[0], email)

    def verify(self, id_token: str) -> AuthUser:
        uid = self.sessions.get(id_token)
        if uid is None:
            raise AuthenticationError("INVALID_ID_TOKEN")
        email = next((e for e, (u, _, _) in self.accounts.items() if u == uid), None)
        return AuthUser(user_id=uid, email=email)

    def sign_out(self, id_token: str) -> None:
        with self._lock:
            self.sessions.pop(id_token, None)

    def reset(self) -> None:
        with self._lock:
            self.accounts.clear()
            self.sessions.clear()
