"""
Monthly Aggregation Engine

Total spend and per-category subtotals for one user over one calendar month.

The window runs from the first instant of the month through the last
microsecond of its last day (UTC), so month length and leap years come
from the calendar and every instant belongs to exactly one month.
Sums use Decimal; ``total_spent`` always equals the sum of the category
totals. Categories appear in the order they are first seen among the
fetched expenses, which is storage insertion order.
"""

import calendar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

from .models import DateRange, format_amount, utc_now
from .repository import ExpenseRepository


@dataclass
class CategoryTotal:
    category: str
    total: Decimal = Decimal("0")

    def to_public(self) -> Dict[str, Any]:
        return {"category": self.category, "total": format_amount(self.total)}


@dataclass
class MonthlySummary:
    year: int
    month: int
    total_spent: Decimal = Decimal("0")
    categories: List[CategoryTotal] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def to_public(self) -> Dict[str, Any]:
        return {
            "month": self.label,
            "totalSpent": format_amount(self.total_spent),
            "categories": [c.to_public() for c in self.categories],
        }


def month_window(year: int, month: int) -> DateRange:
    """Inclusive UTC window covering the whole calendar month"""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime(year, month, last_day, 23, 59, 59, 999999, tzinfo=timezone.utc)
    return DateRange(start=start, end=end)


def aggregate(year: int, month: int, amounts: List[Tuple[str, Decimal]]) -> MonthlySummary:
    """Group (category, amount) pairs into a summary"""
    summary = MonthlySummary(year=year, month=month)
    by_category: Dict[str, CategoryTotal] = {}
    for category, amount in amounts:
        entry = by_category.get(category)
        if entry is None:
            entry = CategoryTotal(category=category)
            by_category[category] = entry
            summary.categories.append(entry)
        entry.total += amount
        summary.total_spent += amount
    return summary


class MonthlyAggregationEngine:
    """Builds monthly summaries from the repository"""

    def __init__(self, repository: ExpenseRepository,
                 clock: Optional[Callable[[], datetime]] = None):
        self.repository = repository
        self._clock = clock or utc_now

    def summarize(self, user_id: str, year: Optional[int] = None,
                  month: Optional[int] = None) -> MonthlySummary:
        """Summary for the given month, defaulting to the current UTC year/month"""
        now = self._clock()
        target_year = year if year is not None else now.year
        target_month = month if month is not None else now.month

        window = month_window(target_year, target_month)
        expenses = self.repository.list_expenses_for_user(user_id, date_range=window)
        return aggregate(
            target_year, target_month,
            [(expense.category, expense.amount) for expense in expenses]
        )
