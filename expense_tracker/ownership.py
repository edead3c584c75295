"""
Ownership Authorization

A resource may be read or changed only by the user in its owner field. There
is no sharing and no admin override. Absence is checked before ownership, so
a missing id is NotFound for every requester.
"""

from typing import Optional

from .errors import Forbidden, NotFound
from .logging_config import get_logger, log_action
from .models import Expense, Principal


logger = get_logger("expense_tracker.ownership")


def authorize_expense(expense: Optional[Expense], principal: Principal,
                      expense_id: str) -> Expense:
    """Return the expense if the principal owns it"""
    if expense is None:
        raise NotFound(f"Expense with ID {expense_id} not found")
    if expense.owner_id != principal.user_id:
        log_action(
            logger, "warning", "Ownership check failed",
            user_id=principal.user_id, action="access_denied",
            resource=f"expense:{expense_id}"
        )
        raise Forbidden("You can only access your own expenses")
    return expense
