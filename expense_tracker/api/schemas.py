"""
Pydantic schemas for API requests

These describe request shape only. Business rules (email format, positive
amounts, ISO dates) live in ``expense_tracker.validation``.
"""

from decimal import Decimal
from typing import Optional, Union
from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(..., description="User email address", examples=["user@example.com"])
    password: str = Field(..., description="Password (minimum 6 characters)")
    name: Optional[str] = Field(None, description="Display name", examples=["John Doe"])

    class Config:
        extra = "forbid"


class LoginRequest(BaseModel):
    email: str = Field(..., examples=["user@example.com"])
    password: str

    class Config:
        extra = "forbid"


class CreateExpenseRequest(BaseModel):
    amount: Union[Decimal, str] = Field(..., description="Positive amount, at most two decimals",
                                      examples=[25.50])
    date: str = Field(..., description="ISO-8601 timestamp", examples=["2025-01-15T10:00:00Z"])
    category: str = Field(..., examples=["Food"])
    note: Optional[str] = Field(None, examples=["Lunch at restaurant"])

    class Config:
        extra = "forbid"


class UpdateExpenseRequest(BaseModel):
    """All fields optional; only the fields sent are changed"""
    amount: Optional[Union[Decimal, str]] = None
    date: Optional[str] = None
    category: Optional[str] = None
    note: Optional[str] = None

    class Config:
        extra = "forbid"
