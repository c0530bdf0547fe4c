"""
Custom exception hierarchy for parameter-schema.
"""
from typing import Any, Dict, Optional


class ParameterSchemaError(Exception):
    """Base exception for all parameter-schema errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'details': self.details
        }


class ConfigurationError(ParameterSchemaError):
    """Raised when a schema is configured inconsistently or an unknown kind is requested."""
    pass


class ValidationError(ParameterSchemaError):
    """Raised by validate_or_raise when a value is rejected."""
    pass


class SettingsError(ParameterSchemaError):
    """Raised when engine settings cannot be loaded or are invalid."""
    pass
