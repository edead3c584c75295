"""
Registration and login endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import ExpenseTrackerSystem, get_system
from .schemas import RegisterRequest, LoginRequest
from ..errors import ValidationError
from ..validation import validate_registration, validate_login


router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    system: ExpenseTrackerSystem = Depends(get_system)
):
    """Register a new user and return a session token"""
    result = validate_registration(
        request.email, request.password, request.name,
        min_password_length=system.config.password_min_length
    )
    if not result.is_valid:
        raise ValidationError(result.violations)
    
    session = system.auth_service.register(**result.value)
    return session.to_public()


@router.post("/login")
def login(
    request: LoginRequest,
    system: ExpenseTrackerSystem = Depends(get_system)
):
    """Exchange email and password for a session token"""
    result = validate_login(request.email, request.password)
    if not result.is_valid:
        raise ValidationError(result.violations)
    
    session = system.auth_service.login(**result.value)
    return session.to_public()
