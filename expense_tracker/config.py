"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings


class ExpenseTrackerConfig(BaseSettings):
    """Expense tracker service configuration"""
    
    # Storage configuration
    database_path: str = "expenses.db"
    use_sqlite: bool = True  # False selects the in-memory backend
    
    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_reload: bool = False
    
    # Security configuration
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiry_hours: int = 24
    password_min_length: int = 6
    scrypt_n: int = 16384
    scrypt_r: int = 8
    scrypt_p: int = 1
    
    # Logging configuration
    log_level: str = "INFO"
    log_requests: bool = True
    
    # Query configuration
    recent_expenses_limit: int = 5
    
    class Config:
        env_prefix = "EXPENSES_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = ExpenseTrackerConfig()


def get_config() -> ExpenseTrackerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> ExpenseTrackerConfig:
    """Reload configuration from environment"""
    global config
    config = ExpenseTrackerConfig()
    return config
