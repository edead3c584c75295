"""
Session Token Codec

Stateless HS256 session tokens issued with PyJWT. A token carries the user id
as ``sub`` plus the email, issue time and expiry. Validity depends only on the
signature and ``exp``; there is no server-side revocation list.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

import jwt

from .errors import InvalidSignature, MalformedToken, TokenExpired
from .models import Principal, utc_now


REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


class SessionTokenCodec:
    """Issues and verifies signed, time-bounded session tokens"""

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=24),
                 algorithm: str = "HS256",
                 clock: Optional[Callable[[], datetime]] = None):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("Token TTL must be positive")
        self._secret = secret
        self.ttl = ttl
        self.algorithm = algorithm
        self._clock = clock or utc_now

    def issue(self, principal: Principal) -> str:
        """Sign a token for the principal, expiring after the configured TTL"""
        now = self._clock()
        payload = {
            "sub": principal.user_id,
            "email": principal.email,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Principal:
        """
        Verify a token and return the principal it asserts.

        Raises:
            MalformedToken: token cannot be parsed or lacks required claims
            InvalidSignature: signature does not match the claims
            TokenExpired: current time is at or past ``exp``
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                # Expiry is checked below against the injected clock
                options={"verify_exp": False, "verify_iat": False,
                         "require": REQUIRED_CLAIMS},
            )
        except jwt.InvalidSignatureError:
            raise InvalidSignature()
        except jwt.PyJWTError as e:
            raise MalformedToken(str(e))

        subject = payload["sub"]
        email = payload["email"]
        expires_at = payload["exp"]
        if not isinstance(subject, str) or not subject or not isinstance(email, str):
            raise MalformedToken("Token claims have unexpected types")
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            raise MalformedToken("Token expiry is not a timestamp")

        if self._clock().timestamp() >= expires_at:
            raise TokenExpired()

        return Principal(user_id=subject, email=email)
