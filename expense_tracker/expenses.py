"""
Expense Management Module

Create, read, update and delete expenses on behalf of an authenticated
principal. The principal is always passed in explicitly; reads and writes of
a single expense go through the same ownership check.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .logging_config import get_logger, log_action
from .models import DateRange, Expense, Principal
from .ownership import authorize_expense
from .repository import ExpenseRepository
from .summary import MonthlyAggregationEngine, MonthlySummary


logger = get_logger("expense_tracker.expenses")


class ExpenseManager:
    """Owner-scoped expense operations"""

    def __init__(self, repository: ExpenseRepository,
                 aggregation_engine: Optional[MonthlyAggregationEngine] = None,
                 recent_limit: int = 5):
        self.repository = repository
        self.aggregation_engine = aggregation_engine or MonthlyAggregationEngine(repository)
        self.recent_limit = recent_limit

    def create_expense(self, principal: Principal, amount: Decimal, date: datetime,
                       category: str, note: Optional[str] = None) -> Expense:
        expense = self.repository.create_expense(
            owner_id=principal.user_id,
            amount=amount,
            date=date,
            category=category,
            note=note,
        )
        log_action(logger, "info", "Expense created", user_id=principal.user_id,
                   action="create_expense", resource=f"expense:{expense.id}")
        return expense

    def list_expenses(self, principal: Principal, start_date: Optional[datetime] = None,
                      end_date: Optional[datetime] = None,
                      category: Optional[str] = None) -> List[Expense]:
        """The principal's expenses, newest first"""
        date_range = None
        if start_date is not None or end_date is not None:
            date_range = DateRange(start=start_date, end=end_date)
        expenses = self.repository.list_expenses_for_user(
            principal.user_id, date_range=date_range, category=category
        )
        return sorted(expenses, key=lambda e: e.date, reverse=True)

    def recent_expenses(self, principal: Principal) -> List[Expense]:
        return self.list_expenses(principal)[:self.recent_limit]

    def get_expense(self, principal: Principal, expense_id: str) -> Expense:
        expense = self.repository.find_expense_by_id(expense_id)
        return authorize_expense(expense, principal, expense_id)

    def update_expense(self, principal: Principal, expense_id: str,
                       changes: Dict[str, Any]) -> Expense:
        """Partially update an expense the principal owns"""
        self.get_expense(principal, expense_id)
        expense = self.repository.update_expense(expense_id, changes)
        log_action(logger, "info", "Expense updated", user_id=principal.user_id,
                   action="update_expense", resource=f"expense:{expense_id}",
                   extra={"fields": sorted(changes)})
        return expense

    def delete_expense(self, principal: Principal, expense_id: str) -> None:
        self.get_expense(principal, expense_id)
        self.repository.delete_expense(expense_id)
        log_action(logger, "info", "Expense deleted", user_id=principal.user_id,
                   action="delete_expense", resource=f"expense:{expense_id}")

    def monthly_summary(self, principal: Principal, year: Optional[int] = None,
                        month: Optional[int] = None) -> MonthlySummary:
        return self.aggregation_engine.summarize(principal.user_id, year=year, month=month)
