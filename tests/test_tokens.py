"""
Tests for the session token codec
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from expense_tracker.errors import (
    InvalidSignature, MalformedToken, TokenExpired, Unauthenticated
)
from expense_tracker.models import Principal
from expense_tracker.tokens import SessionTokenCodec


SECRET = "test-secret"
START = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


class Clock:
    """Manually advanced clock"""
    
    def __init__(self, now: datetime):
        self.now = now
    
    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return Clock(START)


@pytest.fixture
def codec(clock):
    return SessionTokenCodec(SECRET, ttl=timedelta(hours=1), clock=clock)


@pytest.fixture
def principal():
    return Principal(user_id="user-1", email="alice@example.com")


def _flip_signature_char(token: str) -> str:
    header, payload, signature = token.split(".")
    # A middle character always maps to signature bits, unlike the last one
    index = len(signature) // 2
    replacement = "A" if signature[index] != "A" else "B"
    return ".".join([header, payload, signature[:index] + replacement + signature[index + 1:]])


class TestIssue:
    
    def test_claims(self, codec, principal):
        token = codec.issue(principal)
        claims = jwt.decode(token, SECRET, algorithms=["HS256"],
                            options={"verify_exp": False})
        assert claims["sub"] == "user-1"
        assert claims["email"] == "alice@example.com"
        assert claims["iat"] == int(START.timestamp())
        assert claims["exp"] == int((START + timedelta(hours=1)).timestamp())
    
    def test_round_trip(self, codec, principal):
        assert codec.verify(codec.issue(principal)) == principal
    
    def test_rejects_empty_secret(self):
        with pytest.raises(ValueError):
            SessionTokenCodec("")
    
    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            SessionTokenCodec(SECRET, ttl=timedelta(0))


class TestVerify:
    
    def test_valid_until_just_before_expiry(self, codec, clock, principal):
        token = codec.issue(principal)
        clock.now = START + timedelta(minutes=59, seconds=59)
        assert codec.verify(token) == principal
    
    def test_expired_at_exp(self, codec, clock, principal):
        token = codec.issue(principal)
        clock.now = START + timedelta(hours=1)
        with pytest.raises(TokenExpired):
            codec.verify(token)
    
    def test_expired_after_exp(self, codec, clock, principal):
        token = codec.issue(principal)
        clock.now = START + timedelta(days=2)
        with pytest.raises(TokenExpired):
            codec.verify(token)
    
    def test_flipped_signature(self, codec, principal):
        token = _flip_signature_char(codec.issue(principal))
        with pytest.raises(InvalidSignature):
            codec.verify(token)
    
    def test_other_secret(self, codec, clock, principal):
        other = SessionTokenCodec("another-secret", ttl=timedelta(hours=1), clock=clock)
        with pytest.raises(InvalidSignature):
            codec.verify(other.issue(principal))
    
    def test_tampered_claims(self, codec, principal):
        header, payload, signature = codec.issue(principal).split(".")
        claims = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
        claims["sub"] = "user-2"
        forged = base64.urlsafe_b64encode(json.dumps(claims).encode()).decode().rstrip("=")
        with pytest.raises(InvalidSignature):
            codec.verify(".".join([header, forged, signature]))
    
    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "a.b"])
    def test_malformed(self, codec, token):
        with pytest.raises(MalformedToken):
            codec.verify(token)
    
    def test_missing_claim_is_malformed(self, codec):
        token = jwt.encode({"sub": "user-1", "exp": int(START.timestamp()) + 60},
                           SECRET, algorithm="HS256")
        with pytest.raises(MalformedToken):
            codec.verify(token)
    
    def test_unsigned_token_rejected(self, codec):
        token = jwt.encode(
            {"sub": "user-1", "email": "a@b.co", "iat": 0,
             "exp": int(START.timestamp()) + 60},
            None, algorithm="none"
        )
        with pytest.raises(Unauthenticated):
            codec.verify(token)
    
    def test_all_failures_are_unauthenticated(self):
        for kind in (InvalidSignature, TokenExpired, MalformedToken):
            assert issubclass(kind, Unauthenticated)
            assert kind().status_code == 401
