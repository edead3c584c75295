"""
Domain Models

Users, expenses and the per-request principal. Amounts are Decimal and all
timestamps are timezone-aware UTC datetimes.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from .storage import StorageRecord


CENTS = Decimal("0.01")


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_amount(amount: Decimal) -> str:
    """Render an amount with exactly two fractional digits"""
    return str(amount.quantize(CENTS))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(value: datetime) -> str:
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


@dataclass
class User(StorageRecord):
    """Registered account. The hash never leaves the service."""
    email: str
    password_hash: str
    name: Optional[str] = None

    def to_public(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "name": self.name}


@dataclass
class Expense(StorageRecord):
    """A single spending record owned by exactly one user"""
    owner_id: str
    amount: Decimal
    date: datetime
    category: str
    note: Optional[str] = None

    _datetime_fields = ('date',)
    _decimal_fields = ('amount',)

    def to_public(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "amount": format_amount(self.amount),
            "date": isoformat_utc(self.date),
            "category": self.category,
            "note": self.note,
            "userId": self.owner_id,
            "createdAt": isoformat_utc(self.created_at),
            "updatedAt": isoformat_utc(self.updated_at),
        }


@dataclass(frozen=True)
class Principal:
    """Identity resolved from a verified session token for one request"""
    user_id: str
    email: str


@dataclass(frozen=True)
class DateRange:
    """Inclusive window; either bound may be open"""
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def contains(self, moment: datetime) -> bool:
        moment = ensure_utc(moment)
        if self.start is not None and moment < ensure_utc(self.start):
            return False
        if self.end is not None and moment > ensure_utc(self.end):
            return False
        return True
