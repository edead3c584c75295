"""
Error Taxonomy

Every failure the service reports carries the HTTP status it maps to at the
API boundary. Token failures keep their specific kind for logging but share
the Unauthenticated status, so callers cannot tell tampering from expiry.
"""

from typing import List, Optional


class ExpenseTrackerError(Exception):
    """Base class for all errors surfaced to the API boundary"""
    
    status_code = 500
    default_message = "Internal error"
    
    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ExpenseTrackerError):
    """Malformed or missing input"""
    
    status_code = 400
    default_message = "Validation failed"
    
    def __init__(self, violations: Optional[List[str]] = None, message: Optional[str] = None):
        self.violations = list(violations or [])
        if message is None and self.violations:
            message = "; ".join(self.violations)
        super().__init__(message)


class ConflictError(ExpenseTrackerError):
    """Duplicate unique key"""
    
    status_code = 409
    default_message = "Resource already exists"


class Unauthenticated(ExpenseTrackerError):
    """Missing, invalid or expired credentials"""
    
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(ExpenseTrackerError):
    """Authenticated but not the owner of the resource"""
    
    status_code = 403
    default_message = "Forbidden"


class NotFound(ExpenseTrackerError):
    """Resource absent"""
    
    status_code = 404
    default_message = "Not found"


class StorageError(ExpenseTrackerError):
    """Storage backend failure, distinct from a missing record"""
    
    status_code = 500
    default_message = "Storage failure"


# Token verification failure kinds

class TokenError(Unauthenticated):
    """Base for session token failures"""
    
    default_message = "Invalid token"


class InvalidSignature(TokenError):
    default_message = "Token signature mismatch"


class TokenExpired(TokenError):
    default_message = "Token expired"


class MalformedToken(TokenError):
    default_message = "Token could not be parsed"
