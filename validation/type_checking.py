"""
Runtime classification of values into the kinds the schemas understand.
"""
from collections.abc import Mapping
from enum import Enum
from typing import Any
import numpy as np

from .result import ABSENT


class ValueKind(Enum):
    """Closed set of value kinds produced by classify()."""
    NIL = 'nil'
    STRING = 'string'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    ARRAY = 'array'
    OBJECT = 'object'
    OTHER = 'other'


class SchemaKind(Enum):
    """Tags identifying each schema variant."""
    STRING = 'string'
    STRING_ARRAY = 'string[]'
    NUMBER = 'number'
    NUMBER_ARRAY = 'number[]'
    BOOLEAN = 'boolean'
    BOOLEAN_ARRAY = 'boolean[]'
    OBJECT = 'object'
    OBJECT_ARRAY = 'object[]'
    MIXED_ARRAY = 'array'
    ANY = 'any'


def classify(value: Any) -> ValueKind:
    """
    Classify a value.

    bool is checked before the numeric types because it subclasses int;
    a boolean is never a number here.
    """
    if value is None or value is ABSENT:
        return ValueKind.NIL
    if isinstance(value, (bool, np.bool_)):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, np.integer, np.floating)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    if isinstance(value, np.ndarray) and value.ndim == 1:
        return ValueKind.ARRAY
    if isinstance(value, Mapping):
        return ValueKind.OBJECT
    return ValueKind.OTHER


def is_nil(value: Any) -> bool:
    return classify(value) is ValueKind.NIL


def is_string(value: Any) -> bool:
    return classify(value) is ValueKind.STRING


def is_number(value: Any) -> bool:
    return classify(value) is ValueKind.NUMBER


def is_boolean(value: Any) -> bool:
    return classify(value) is ValueKind.BOOLEAN


def is_array(value: Any) -> bool:
    return classify(value) is ValueKind.ARRAY


def is_mapping(value: Any) -> bool:
    return classify(value) is ValueKind.OBJECT
