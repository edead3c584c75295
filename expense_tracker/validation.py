"""
Input Validation

One function per input shape. Each returns a ValidationResult instead of
raising, so the caller decides how a failure is reported. On success
``value`` holds the normalised input (trimmed strings, Decimal amounts,
UTC datetimes).
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from .models import CENTS, ensure_utc


EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
MIN_AMOUNT = CENTS


@dataclass
class ValidationResult:
    """Outcome of validating one input shape"""
    is_valid: bool
    violations: List[str] = field(default_factory=list)
    value: Dict[str, Any] = field(default_factory=dict)


def _result(violations: List[str], value: Dict[str, Any]) -> ValidationResult:
    if violations:
        return ValidationResult(is_valid=False, violations=violations)
    return ValidationResult(is_valid=True, value=value)


def _check_email(email: Any, violations: List[str]) -> Optional[str]:
    if not isinstance(email, str) or not email:
        violations.append("Email is required")
        return None
    if not EMAIL_PATTERN.match(email):
        violations.append("Please provide a valid email address")
        return None
    return email


def parse_amount(amount: Any, violations: List[str]) -> Optional[Decimal]:
    if amount is None or isinstance(amount, bool):
        violations.append("Amount must be a valid number")
        return None
    try:
        # str() first so plain floats keep their shortest decimal representation
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        violations.append("Amount must be a valid number")
        return None
    if not value.is_finite():
        violations.append("Amount must be a valid number")
        return None
    if value < MIN_AMOUNT:
        violations.append("Amount must be greater than 0")
        return None
    try:
        quantized = value.quantize(CENTS)
    except InvalidOperation:
        violations.append("Amount is too large")
        return None
    if value != quantized:
        violations.append("Amount must have at most two decimal places")
        return None
    return quantized


def parse_timestamp(raw: Any, label: str, violations: List[str]) -> Optional[datetime]:
    if isinstance(raw, datetime):
        return ensure_utc(raw)
    if not isinstance(raw, str) or not raw.strip():
        violations.append(f"{label} must be a valid ISO date string")
        return None
    text = raw.strip()
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        violations.append(f"{label} must be a valid ISO date string")
        return None


def _check_category(category: Any, violations: List[str]) -> Optional[str]:
    if not isinstance(category, str) or not category.strip():
        violations.append("Category is required")
        return None
    return category.strip()


def _check_note(note: Any, violations: List[str]) -> Optional[str]:
    if note is None:
        return None
    if not isinstance(note, str):
        violations.append("Note must be a string")
        return None
    return note


def validate_registration(email: Any, password: Any, name: Any = None,
                          min_password_length: int = 6) -> ValidationResult:
    """Validate a registration request"""
    violations: List[str] = []
    email = _check_email(email, violations)

    if not isinstance(password, str) or not password:
        violations.append("Password is required")
    elif len(password) < min_password_length:
        violations.append(
            f"Password must be at least {min_password_length} characters long"
        )

    if name is not None and not isinstance(name, str):
        violations.append("Name must be a string")
    elif isinstance(name, str):
        name = name.strip() or None

    return _result(violations, {"email": email, "password": password, "name": name})


def validate_login(email: Any, password: Any) -> ValidationResult:
    """Validate a login request"""
    violations: List[str] = []
    email = _check_email(email, violations)
    if not isinstance(password, str) or not password:
        violations.append("Password is required")
    return _result(violations, {"email": email, "password": password})


def validate_new_expense(amount: Any, date: Any, category: Any,
                         note: Any = None) -> ValidationResult:
    """Validate the fields of an expense being created; all but note are required"""
    violations: List[str] = []
    value = {
        "amount": parse_amount(amount, violations),
        "date": parse_timestamp(date, "Date", violations),
        "category": _check_category(category, violations),
        "note": _check_note(note, violations),
    }
    return _result(violations, value)


def validate_expense_changes(changes: Dict[str, Any]) -> ValidationResult:
    """
    Validate a partial update. Only the keys present in ``changes`` are
    checked and returned; an explicit ``note: None`` clears the note.
    """
    violations: List[str] = []
    value: Dict[str, Any] = {}

    unknown = set(changes) - {"amount", "date", "category", "note"}
    for key in sorted(unknown):
        violations.append(f"Unknown field: {key}")

    if "amount" in changes:
        value["amount"] = parse_amount(changes["amount"], violations)
    if "date" in changes:
        value["date"] = parse_timestamp(changes["date"], "Date", violations)
    if "category" in changes:
        value["category"] = _check_category(changes["category"], violations)
    if "note" in changes:
        value["note"] = _check_note(changes["note"], violations)

    return _result(violations, value)


def validate_expense_filter(start_date: Any = None, end_date: Any = None,
                            category: Any = None) -> ValidationResult:
    """Validate list filters; every filter is optional"""
    violations: List[str] = []
    start = end = None
    if start_date is not None:
        start = parse_timestamp(start_date, "Start date", violations)
    if end_date is not None:
        end = parse_timestamp(end_date, "End date", violations)
    if start is not None and end is not None and start > end:
        violations.append("Start date must not be after end date")
    if category is not None and not isinstance(category, str):
        violations.append("Category must be a string")
    return _result(violations, {"start_date": start, "end_date": end,
                                "category": category or None})


def validate_summary_period(year: Any = None, month: Any = None) -> ValidationResult:
    """Validate the optional year/month of a monthly summary"""
    violations: List[str] = []
    if year is not None and (isinstance(year, bool) or not isinstance(year, int)
                             or not 1 <= year <= 9999):
        violations.append("Year must be between 1 and 9999")
    if month is not None and (isinstance(month, bool) or not isinstance(month, int)
                              or not 1 <= month <= 12):
        violations.append("Month must be between 1 and 12")
    return _result(violations, {"year": year, "month": month})
