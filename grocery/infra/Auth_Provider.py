"""Authentication collaborators.

Auth answers one question for the mutation gateway and live views: who is the
current user (None when nobody is signed in). Accounts create email/password
users, the server side of the sign-up screen.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from threading import Lock
from typing import Optional

from firebase_admin import auth as firebase_auth
from firebase_admin.exceptions import FirebaseError

from grocery.infra.push_ids import new_push_id
from grocery.utilities.errors import AuthError

logger = logging.getLogger(__name__)


class Auth(ABC):
    @abstractmethod
    def current_user_id(self) -> Optional[str]: ...


class StaticAuth(Auth):
    """A fixed (possibly absent) user, as trusted in development mode."""

    def __init__(self, user_id: Optional[str] = None):
        self._user_id = (user_id or "").strip() or None

    def current_user_id(self) -> Optional[str]:
        return self._user_id


class FirebaseTokenAuth(Auth):
    """Resolves the user from a Firebase ID token, verified once on first use."""

    def __init__(self, id_token: Optional[str], app=None):
        self._token = id_token
        self._app = app
        self._resolved = False
        self._user_id: Optional[str] = None

    def current_user_id(self) -> Optional[str]:
        if not self._resolved:
            self._resolved = True
            if self._token:
                try:
                    decoded = firebase_auth.verify_id_token(self._token, app=self._app)
                    self._user_id = decoded.get("uid")
                except (ValueError, FirebaseError) as e:
                    logger.warning("Rejected ID token: %s", e)
        return self._user_id


def auth_from_headers(mode: str, authorization: Optional[str], user_header: Optional[str], app=None) -> Auth:
    """Build the per-request Auth for the configured mode ("firebase" or "dev")."""
    if mode == "firebase":
        token = None
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization[7:].strip()
        return FirebaseTokenAuth(token, app=app)
    return StaticAuth(user_header)


class Accounts(ABC):
    @abstractmethod
    def sign_up(self, email: str, password: str) -> str:
        """Create a user and return its id. Raises AuthError."""


class InMemoryAccounts(Accounts):
    def __init__(self):
        self._users: dict[str, str] = {}
        self._lock = Lock()

    def sign_up(self, email: str, password: str) -> str:
        if len(password) < 6:
            raise AuthError("Password should be at least 6 characters")
        key = email.lower()
        with self._lock:
            if key in self._users:
                raise AuthError("The email address is already in use by another account.")
            uid = new_push_id()
            self._users[key] = uid
        return uid


class FirebaseAccounts(Accounts):
    def __init__(self, app=None):
        self._app = app

    def sign_up(self, email: str, password: str) -> str:
        try:
            user = firebase_auth.create_user(email=email, password=password, app=self._app)
        except (ValueError, FirebaseError) as e:
            raise AuthError(str(e)) from e
        logger.info("Created user %s", user.uid)
        return user.uid


__all__ = [
    'Auth', 'StaticAuth', 'FirebaseTokenAuth', 'auth_from_headers',
    'Accounts', 'InMemoryAccounts', 'FirebaseAccounts',
]
