"""
Composable parameter validation for parameter-schema.

Example:
    from validation import Schema

    schema = Schema.object().set_field_schemas({
        'name': Schema.string(),
        'size': Schema.number(max=10).set_default(1),
    })
    accepted, params = schema.validate({'name': 'a', 'extra': True})
    # accepted is True, params == {'name': 'a', 'size': 1}
"""
from .result import (
    ABSENT,
    ValidationResult,
    ValidationReport,
    ValidationContext,
    format_path
)
from .type_checking import (
    ValueKind,
    SchemaKind,
    classify,
    is_nil,
    is_string,
    is_number,
    is_boolean,
    is_array,
    is_mapping
)
from .validators import (
    Predicate,
    TruthyPredicate,
    KindPredicate,
    BoundsPredicate,
    MembershipPredicate,
    CompositePredicate,
    EachPredicate
)
from .schema import (
    Schema,
    StringSchema,
    StringArraySchema,
    NumberSchema,
    NumberArraySchema,
    BooleanSchema,
    BooleanArraySchema
)
from .composite import (
    ObjectSchema,
    ObjectArraySchema,
    MixedArraySchema
)
from .factory import SchemaFactory

__all__ = [
    'ABSENT',
    'ValidationResult',
    'ValidationReport',
    'ValidationContext',
    'format_path',
    'ValueKind',
    'SchemaKind',
    'classify',
    'is_nil',
    'is_string',
    'is_number',
    'is_boolean',
    'is_array',
    'is_mapping',
    'Predicate',
    'TruthyPredicate',
    'KindPredicate',
    'BoundsPredicate',
    'MembershipPredicate',
    'CompositePredicate',
    'EachPredicate',
    'Schema',
    'StringSchema',
    'StringArraySchema',
    'NumberSchema',
    'NumberArraySchema',
    'BooleanSchema',
    'BooleanArraySchema',
    'ObjectSchema',
    'ObjectArraySchema',
    'MixedArraySchema',
    'SchemaFactory',
]
