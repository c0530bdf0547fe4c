"""
Utility modules for parameter-schema.
"""
from .logging_config import get_logger, LoggerFactory, StructuredFormatter
from .exceptions import (
    ParameterSchemaError,
    ConfigurationError,
    ValidationError,
    SettingsError
)

__all__ = [
    'get_logger',
    'LoggerFactory',
    'StructuredFormatter',
    'ParameterSchemaError',
    'ConfigurationError',
    'ValidationError',
    'SettingsError',
]
