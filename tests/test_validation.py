"""
Tests for input validation
"""

from datetime import datetime, timezone, timedelta
from decimal import Decimal

import pytest

from expense_tracker.validation import (
    validate_expense_changes,
    validate_expense_filter,
    validate_login,
    validate_new_expense,
    validate_registration,
    validate_summary_period,
)


class TestRegistration:
    
    def test_valid(self):
        result = validate_registration("user@example.com", "password123", "  John Doe ")
        assert result.is_valid
        assert result.violations == []
        assert result.value == {
            "email": "user@example.com", "password": "password123", "name": "John Doe"
        }
    
    def test_blank_name_becomes_none(self):
        assert validate_registration("user@example.com", "password123", "   ").value["name"] is None
    
    @pytest.mark.parametrize("email", ["", "user", "user@", "@example.com", "user@example", None])
    def test_bad_email(self, email):
        result = validate_registration(email, "password123")
        assert not result.is_valid
        assert result.value == {}
    
    def test_short_password(self):
        result = validate_registration("user@example.com", "12345")
        assert not result.is_valid
        assert result.violations == ["Password must be at least 6 characters long"]
    
    def test_configurable_min_length(self):
        assert not validate_registration("user@example.com", "1234567", min_password_length=8).is_valid
    
    def test_collects_every_violation(self):
        result = validate_registration("bad", "")
        assert len(result.violations) == 2


class TestLogin:
    
    def test_valid(self):
        assert validate_login("user@example.com", "x").is_valid
    
    def test_missing_password(self):
        result = validate_login("user@example.com", "")
        assert result.violations == ["Password is required"]


class TestNewExpense:
    
    def test_valid(self):
        result = validate_new_expense(25.5, "2025-01-15T10:00:00Z", " Food ", "Lunch")
        assert result.is_valid
        assert result.value == {
            "amount": Decimal("25.50"),
            "date": datetime(2025, 1, 15, 10, tzinfo=timezone.utc),
            "category": "Food",
            "note": "Lunch",
        }
    
    def test_string_amount(self):
        assert validate_new_expense("120", "2025-01-20", "Travel").value["amount"] == Decimal("120.00")
    
    def test_naive_date_is_utc(self):
        value = validate_new_expense("1", "2025-01-15T10:00:00", "Food").value
        assert value["date"] == datetime(2025, 1, 15, 10, tzinfo=timezone.utc)
    
    def test_offset_date_converted_to_utc(self):
        value = validate_new_expense("1", "2025-01-15T10:00:00+02:00", "Food").value
        assert value["date"] == datetime(2025, 1, 15, 8, tzinfo=timezone.utc)
        assert value["date"].utcoffset() == timedelta(0)
    
    def test_millisecond_date(self):
        value = validate_new_expense("1", "2025-01-15T10:00:00.000Z", "Food").value
        assert value["date"] == datetime(2025, 1, 15, 10, tzinfo=timezone.utc)
    
    @pytest.mark.parametrize("raw,microsecond", [
        ("2025-01-15T10:00:00.5Z", 500000),
        ("2025-01-15T10:00:00.25Z", 250000),
        ("2025-01-15T10:00:00.1234Z", 123400),
        ("2025-01-15T10:00:00.12345+00:00", 123450),
        ("2025-01-15T10:00:00.999999Z", 999999),
    ])
    def test_any_fractional_second_width(self, raw, microsecond):
        value = validate_new_expense("1", raw, "Food").value
        assert value["date"] == datetime(2025, 1, 15, 10, 0, 0, microsecond, tzinfo=timezone.utc)
    
    def test_decimal_amount_kept_exactly(self):
        value = validate_new_expense(Decimal("1234567890123456.78"), "2025-01-15", "Food").value
        assert value["amount"] == Decimal("1234567890123456.78")
    
    @pytest.mark.parametrize("amount", [0, -1, "0.00", "0.001", "abc", None, True, "NaN", "Infinity", 1e40])
    def test_bad_amount(self, amount):
        assert not validate_new_expense(amount, "2025-01-15", "Food").is_valid
    
    def test_minimum_amount(self):
        assert validate_new_expense("0.01", "2025-01-15", "Food").is_valid
    
    @pytest.mark.parametrize("date", ["", "yesterday", "2025-13-01", "2025-02-30", None, 20250115])
    def test_bad_date(self, date):
        assert not validate_new_expense("1", date, "Food").is_valid
    
    @pytest.mark.parametrize("category", ["", "   ", None, 5])
    def test_bad_category(self, category):
        result = validate_new_expense("1", "2025-01-15", category)
        assert result.violations == ["Category is required"]
    
    def test_bad_note(self):
        assert not validate_new_expense("1", "2025-01-15", "Food", note=42).is_valid


class TestExpenseChanges:
    
    def test_only_supplied_fields(self):
        result = validate_expense_changes({"category": "Transportation"})
        assert result.is_valid
        assert result.value == {"category": "Transportation"}
    
    def test_empty(self):
        result = validate_expense_changes({})
        assert result.is_valid
        assert result.value == {}
    
    def test_null_note_clears(self):
        assert validate_expense_changes({"note": None}).value == {"note": None}
    
    def test_null_required_field_rejected(self):
        assert not validate_expense_changes({"amount": None}).is_valid
        assert not validate_expense_changes({"category": None}).is_valid
    
    def test_unknown_field(self):
        result = validate_expense_changes({"userId": "someone-else"})
        assert result.violations == ["Unknown field: userId"]


class TestFilter:
    
    def test_all_optional(self):
        result = validate_expense_filter()
        assert result.value == {"start_date": None, "end_date": None, "category": None}
    
    def test_dates_parsed(self):
        result = validate_expense_filter("2025-01-01T00:00:00Z", "2025-01-31T23:59:59Z", "Food")
        assert result.value["start_date"] == datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert result.value["category"] == "Food"
    
    def test_reversed_range(self):
        assert not validate_expense_filter("2025-02-01", "2025-01-01").is_valid
    
    def test_bad_date(self):
        assert not validate_expense_filter(start_date="soon").is_valid


class TestSummaryPeriod:
    
    def test_defaults(self):
        assert validate_summary_period().is_valid
    
    @pytest.mark.parametrize("month", [1, 6, 12])
    def test_valid_months(self, month):
        assert validate_summary_period(2025, month).is_valid
    
    @pytest.mark.parametrize("month", [0, 13, -3])
    def test_bad_month(self, month):
        assert validate_summary_period(2025, month).violations == ["Month must be between 1 and 12"]
    
    @pytest.mark.parametrize("year", [0, 10000])
    def test_bad_year(self, year):
        assert not validate_summary_period(year, 1).is_valid
