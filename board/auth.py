"""
Identity verification and admin authorization.

Bearer tokens are Firebase ID tokens. Verification is delegated to the
Firebase Admin SDK; token validity and expiry are entirely the provider's
concern. Admin access is granted by e-mail through a configured allow-list.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin import exceptions as firebase_exceptions

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "nxt-board"

# Serializes first-use initialization of the named Firebase app.
_firebase_app_lock = threading.Lock()


class InvalidTokenError(Exception):
    """Raised when an identity token cannot be resolved to a principal."""


@dataclass(frozen=True)
class Principal:
    """The authenticated identity resolved from a bearer token."""

    uid: str
    email: Optional[str] = None


class IdentityVerifier(Protocol):
    """Resolves an identity-provider token to a principal."""

    def verify(self, token: str) -> Principal:
        ...


class FirebaseIdentityVerifier:
    """
    Verifies Firebase ID tokens with the Admin SDK.

    The Firebase app is initialized on first use so that constructing the
    verifier never touches the network or the credential chain.
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[str] = None,
        check_revoked: bool = False,
        app_name: str = FIREBASE_APP_NAME,
    ):
        self.project_id = project_id
        self.credentials_path = credentials_path
        self.check_revoked = check_revoked
        self.app_name = app_name
        self._app: Optional[firebase_admin.App] = None

    def _get_app(self) -> firebase_admin.App:
        if self._app is not None:
            return self._app
        with _firebase_app_lock:
            if self._app is not None:
                return self._app
            try:
                self._app = firebase_admin.get_app(self.app_name)
            except ValueError:
                if self.credentials_path:
                    cred = credentials.Certificate(self.credentials_path)
                else:
                    cred = credentials.ApplicationDefault()
                options = {"projectId": self.project_id} if self.project_id else None
                self._app = firebase_admin.initialize_app(
                    cred, options=options, name=self.app_name
                )
        return self._app

    def verify(self, token: str) -> Principal:
        if not token:
            raise InvalidTokenError("Missing token")
        # Configuration failures propagate; only token rejections map to 401.
        app = self._get_app()
        try:
            decoded = firebase_auth.verify_id_token(
                token, app=app, check_revoked=self.check_revoked
            )
        except (ValueError, firebase_exceptions.FirebaseError) as exc:
            logger.info("Rejected Firebase ID token: %s", exc)
            raise InvalidTokenError(str(exc)) from exc
        return Principal(uid=decoded["uid"], email=decoded.get("email"))


class InMemoryIdentityVerifier:
    """Token table for development and tests."""

    def __init__(self):
        self.tokens: dict[str, Principal] = {}

    def register(self, token: str, uid: str, email: Optional[str] = None) -> Principal:
        principal = Principal(uid=uid, email=email)
        self.tokens[token] = principal
        return principal

    def revoke(self, token: str) -> None:
        self.tokens.pop(token, None)

    def verify(self, token: str) -> Principal:
        principal = self.tokens.get(token)
        if principal is None:
            raise InvalidTokenError("Unknown token")
        return principal

    def reset(self) -> None:
        self.tokens.clear()


class AdminAllowList:
    """Immutable, case-insensitive set of administrator e-mail addresses."""

    def __init__(self, emails: Iterable[str] = ()):
        self._emails = frozenset(
            email.strip().lower() for email in emails if email and email.strip()
        )

    def __contains__(self, email: object) -> bool:
        return isinstance(email, str) and email.strip().lower() in self._emails

    def __len__(self) -> int:
        return len(self._emails)

    def is_admin(self, principal: Principal) -> bool:
        return principal.email is not None and principal.email in self
