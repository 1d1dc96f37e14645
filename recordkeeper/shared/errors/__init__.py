from .base import AppError, ConfigError, DomainError, InfrastructureError, ValidationError
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "ConfigError",
    "DomainError",
    "InfrastructureError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
