"""
Service wiring and request dependencies
"""

from datetime import timedelta
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..auth import AuthService
from ..config import ExpenseTrackerConfig, get_config
from ..expenses import ExpenseManager
from ..models import Principal
from ..passwords import PasswordHasher
from ..repository import ExpenseRepository
from ..storage import InMemoryStorage, SQLiteStorage, StorageInterface
from ..summary import MonthlyAggregationEngine
from ..tokens import SessionTokenCodec


# Declares the bearer scheme in the OpenAPI docs; the gate reads the raw header itself
security = HTTPBearer(auto_error=False)


class ExpenseTrackerSystem:
    """All service components, built once from configuration"""
    
    def __init__(self, config: Optional[ExpenseTrackerConfig] = None,
                 storage: Optional[StorageInterface] = None):
        self.config = config or get_config()
        
        if storage is None:
            if self.config.use_sqlite:
                storage = SQLiteStorage(self.config.database_path)
            else:
                storage = InMemoryStorage()
        self.storage = storage
        
        self.repository = ExpenseRepository(self.storage)
        self.hasher = PasswordHasher(
            n=self.config.scrypt_n, r=self.config.scrypt_r, p=self.config.scrypt_p
        )
        self.token_codec = SessionTokenCodec(
            secret=self.config.jwt_secret,
            ttl=timedelta(hours=self.config.jwt_expiry_hours),
            algorithm=self.config.jwt_algorithm,
        )
        self.auth_service = AuthService(self.repository, self.hasher, self.token_codec)
        self.aggregation_engine = MonthlyAggregationEngine(self.repository)
        self.expense_manager = ExpenseManager(
            self.repository, self.aggregation_engine,
            recent_limit=self.config.recent_expenses_limit
        )
    
    def close(self):
        self.storage.close()


def get_system(request: Request) -> ExpenseTrackerSystem:
    return request.app.state.system


def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    system: ExpenseTrackerSystem = Depends(get_system)
) -> Principal:
    """Authenticate the request before any route logic or storage access"""
    result = system.auth_service.authenticate(request.headers.get("Authorization"))
    if not result.ok:
        raise result.error
    return result.principal
