"""
Settings management for parameter-schema.
"""
from .settings import (
    ValidationSettings,
    get_settings,
    set_settings,
    configure,
    load_settings,
    reset_settings
)

__all__ = [
    'ValidationSettings',
    'get_settings',
    'set_settings',
    'configure',
    'load_settings',
    'reset_settings',
]
