"""
Expense Repository

The persistence collaborator used by the service layer. Wraps a
StorageInterface with typed user/expense operations. Every mutation runs in a
single storage transaction, a missing record is reported as NotFound, and
backend failures surface as StorageError.
"""

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .errors import ConflictError, NotFound, StorageError
from .models import DateRange, Expense, User
from .storage import StorageInterface


USERS_TABLE = "users"
EXPENSES_TABLE = "expenses"


@contextmanager
def _storage_errors():
    try:
        yield
    except sqlite3.Error as e:
        raise StorageError(f"Storage backend failure: {e}") from e


class ExpenseRepository:
    """Typed access to users and expenses"""

    def __init__(self, storage: StorageInterface):
        self.storage = storage

    # Users

    def find_user_by_email(self, email: str) -> Optional[User]:
        """Exact, case-sensitive email lookup"""
        with _storage_errors():
            rows = self.storage.find(USERS_TABLE, {"email": email})
        if not rows:
            return None
        return User.from_dict(rows[0])

    def get_user(self, user_id: str) -> Optional[User]:
        with _storage_errors():
            data = self.storage.load(USERS_TABLE, user_id)
        return User.from_dict(data) if data else None

    def create_user(self, email: str, password_hash: str, name: Optional[str] = None) -> User:
        """Create a user; raises ConflictError if the email is already registered"""
        now = datetime.now(timezone.utc)
        user = User(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            email=email,
            password_hash=password_hash,
            name=name,
        )
        with _storage_errors():
            # Uniqueness check and insert share one transaction
            with self.storage.atomic():
                if self.storage.find(USERS_TABLE, {"email": email}):
                    raise ConflictError("User with this email already exists")
                self.storage.save(USERS_TABLE, user.id, user.to_dict())
        return user

    # Expenses

    def find_expense_by_id(self, expense_id: str) -> Optional[Expense]:
        with _storage_errors():
            data = self.storage.load(EXPENSES_TABLE, expense_id)
        return Expense.from_dict(data) if data else None

    def list_expenses_for_user(self, owner_id: str, date_range: Optional[DateRange] = None,
                               category: Optional[str] = None) -> List[Expense]:
        """
        All expenses owned by ``owner_id`` in insertion order, optionally
        restricted to an inclusive date range and an exact category.
        """
        filters: Dict[str, Any] = {"owner_id": owner_id}
        if category is not None:
            filters["category"] = category
        with _storage_errors():
            rows = self.storage.find(EXPENSES_TABLE, filters)

        expenses = [Expense.from_dict(row) for row in rows]
        if date_range is not None:
            expenses = [e for e in expenses if date_range.contains(e.date)]
        return expenses

    def create_expense(self, owner_id: str, amount: Decimal, date: datetime,
                       category: str, note: Optional[str] = None) -> Expense:
        now = datetime.now(timezone.utc)
        expense = Expense(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            owner_id=owner_id,
            amount=amount,
            date=date,
            category=category,
            note=note,
        )
        with _storage_errors():
            with self.storage.atomic():
                self.storage.save(EXPENSES_TABLE, expense.id, expense.to_dict())
        return expense

    def update_expense(self, expense_id: str, changes: Dict[str, Any]) -> Expense:
        """Apply field changes to an expense; owner and id are never changed"""
        with _storage_errors():
            with self.storage.atomic():
                data = self.storage.load(EXPENSES_TABLE, expense_id)
                if not data:
                    raise NotFound(f"Expense with ID {expense_id} not found")
                expense = Expense.from_dict(data)
                for key in ("amount", "date", "category", "note"):
                    if key in changes:
                        setattr(expense, key, changes[key])
                expense.updated_at = datetime.now(timezone.utc)
                self.storage.save(EXPENSES_TABLE, expense.id, expense.to_dict())
        return expense

    def delete_expense(self, expense_id: str) -> None:
        with _storage_errors():
            with self.storage.atomic():
                if not self.storage.delete(EXPENSES_TABLE, expense_id):
                    raise NotFound(f"Expense with ID {expense_id} not found")
