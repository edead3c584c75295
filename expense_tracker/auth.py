"""
Authentication Module

Registration, login and the request authentication gate.

The gate is a plain function of the raw Authorization header: it never
touches storage, and every token failure (bad signature, expiry, garbage)
collapses into the same Unauthenticated outcome.
"""

import secrets
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import TokenError, Unauthenticated
from .logging_config import get_logger, log_action
from .models import Principal, User
from .passwords import PasswordHasher
from .repository import ExpenseRepository
from .tokens import SessionTokenCodec


logger = get_logger("expense_tracker.auth")

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_TOKEN = "Invalid or expired token"
BEARER_PREFIX = "bearer"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of authenticating one request: exactly one field is set"""
    principal: Optional[Principal] = None
    error: Optional[Unauthenticated] = None

    @property
    def ok(self) -> bool:
        return self.principal is not None


@dataclass(frozen=True)
class AuthSession:
    """Token plus the public view of the user it was issued for"""
    access_token: str
    user: User

    def to_public(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "token_type": "bearer",
            "user": self.user.to_public(),
        }


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the credential from ``Bearer <token>``, or None if absent or not bearer"""
    if not authorization:
        return None
    parts = authorization.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != BEARER_PREFIX:
        return None
    token = parts[1].strip()
    return token or None


def authenticate_header(authorization: Optional[str], codec: SessionTokenCodec) -> AuthResult:
    """Resolve the principal for a raw Authorization header"""
    token = extract_bearer_token(authorization)
    if token is None:
        return AuthResult(error=Unauthenticated("Not authenticated"))
    try:
        principal = codec.verify(token)
    except TokenError as e:
        # The specific kind is only visible in logs
        log_action(
            logger, "info", "Rejected session token",
            action="token_rejected", resource="auth",
            extra={"reason": type(e).__name__}
        )
        return AuthResult(error=Unauthenticated(INVALID_TOKEN))
    return AuthResult(principal=principal)


class AuthService:
    """Registers users and exchanges credentials for session tokens"""

    def __init__(self, repository: ExpenseRepository, hasher: PasswordHasher,
                 codec: SessionTokenCodec):
        self.repository = repository
        self.hasher = hasher
        self.codec = codec
        self._decoy_digest: Optional[str] = None

    def _issue(self, user: User) -> AuthSession:
        token = self.codec.issue(Principal(user_id=user.id, email=user.email))
        return AuthSession(access_token=token, user=user)

    def register(self, email: str, password: str, name: Optional[str] = None) -> AuthSession:
        """
        Create an account and return a session for it.

        Raises:
            ConflictError: the email is already registered
        """
        password_hash = self.hasher.hash(password)
        user = self.repository.create_user(email=email, password_hash=password_hash, name=name)
        log_action(logger, "info", "User registered", user_id=user.id,
                   action="register", resource="user")
        return self._issue(user)

    def login(self, email: str, password: str) -> AuthSession:
        """
        Exchange credentials for a session.

        An unknown email and a wrong password both raise the same
        Unauthenticated error after the same amount of hashing work.
        """
        user = self.repository.find_user_by_email(email)
        if user is None:
            self.hasher.verify(password, self._decoy())
            self._login_failed()
        elif not self.hasher.verify(password, user.password_hash):
            self._login_failed()

        log_action(logger, "info", "User authenticated successfully",
                   user_id=user.id, action="login", resource="auth")
        return self._issue(user)

    def authenticate(self, authorization: Optional[str]) -> AuthResult:
        return authenticate_header(authorization, self.codec)

    def _decoy(self) -> str:
        if self._decoy_digest is None:
            self._decoy_digest = self.hasher.hash(secrets.token_urlsafe(16))
        return self._decoy_digest

    def _login_failed(self):
        log_action(logger, "warning", "Authentication failed",
                   action="login_failed", resource="auth")
        raise Unauthenticated(INVALID_CREDENTIALS)
