"""
Expense endpoints. Every route requires a bearer token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from .dependencies import ExpenseTrackerSystem, get_current_principal, get_system
from .routing import DecimalJSONRoute
from .schemas import CreateExpenseRequest, UpdateExpenseRequest
from ..errors import ValidationError
from ..models import Principal
from ..validation import (
    validate_expense_changes,
    validate_expense_filter,
    validate_new_expense,
    validate_summary_period,
)


router = APIRouter(route_class=DecimalJSONRoute)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_expense(
    request: CreateExpenseRequest,
    principal: Principal = Depends(get_current_principal),
    system: ExpenseTrackerSystem = Depends(get_system)
):
    """Create a new expense"""
    result = validate_new_expense(request.amount, request.date, request.category, request.note)
    if not result.is_valid:
        raise ValidationError(result.violations)
    
    expense = system.expense_manager.create_expense(principal, **result.value)
    return expense.to_public()


@router.get("")
def list_expenses(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    category: Optional[str] = Query(None),
    principal: Principal = Depends(get_current_principal),
    system: ExpenseTrackerSystem = Depends(get_system)
):
    """List the caller's expenses, newest first, with optional filters"""
    result = validate_expense_filter(start_date, end_date, category)
    if not result.is_valid:
        raise ValidationError(result.violations)
    
    expenses = system.expense_manager.list_expenses(principal, **result.value)
    return [expense.to_public() for expense in expenses]


@router.get("/summary/monthly")
def monthly_summary(
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    principal: Principal = Depends(get_current_principal),
    system: ExpenseTrackerSystem = Depends(get_system)
):
    """Total and per-category spending for one calendar month"""
    result = validate_summary_period(year, month)
    if not result.is_valid:
        raise ValidationError(result.violations)
    
    summary = system.expense_manager.monthly_summary(principal, year=year, month=month)
    return summary.to_public()


@router.get("/recent")
def recent_expenses(
    principal: Principal = Depends(get_current_principal),
    system: ExpenseTrackerSystem = Depends(get_system)
):
    """The caller's most recent expenses"""
    expenses = system.expense_manager.recent_expenses(principal)
    return [expense.to_public() for expense in expenses]


@router.get("/{expense_id}")
def get_expense(
    expense_id: str,
    principal: Principal = Depends(get_current_principal),
    system: ExpenseTrackerSystem = Depends(get_system)
):
    """Get one expense by ID"""
    return system.expense_manager.get_expense(principal, expense_id).to_public()


@router.patch("/{expense_id}")
def update_expense(
    expense_id: str,
    request: UpdateExpenseRequest,
    principal: Principal = Depends(get_current_principal),
    system: ExpenseTrackerSystem = Depends(get_system)
):
    """Partially update an expense"""
    result = validate_expense_changes(request.model_dump(exclude_unset=True))
    if not result.is_valid:
        raise ValidationError(result.violations)
    
    expense = system.expense_manager.update_expense(principal, expense_id, result.value)
    return expense.to_public()


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: str,
    principal: Principal = Depends(get_current_principal),
    system: ExpenseTrackerSystem = Depends(get_system)
):
    """Delete an expense"""
    system.expense_manager.delete_expense(principal, expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
