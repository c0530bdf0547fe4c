"""
Composite schemas: objects, arrays of objects and mixed-alternative arrays.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional
from utils.logging_config import get_logger
from utils.exceptions import ConfigurationError
from .result import ABSENT, REJECTED, ValidationContext, ValidationResult
from .schema import Schema
from .type_checking import SchemaKind, classify, is_array, is_mapping

logger = get_logger(__name__)


def _child_problems(label: str, child: Any) -> List[str]:
    if not isinstance(child, Schema):
        return [f"{label} is not a schema: {child!r}"]
    return [f"{label}: {problem}" for problem in child._config_problems()]


class ObjectSchema(Schema):
    """
    Validates mappings field by field.

    Without a custom predicate the output holds exactly the declared fields
    (undeclared input keys are dropped, ABSENT fields omitted). With a custom
    predicate the field schemas are ignored and the output is a shallow copy
    of the input.
    """

    kind = SchemaKind.OBJECT

    def __init__(self, **options):
        super().__init__(**options)
        self.field_schemas: Dict[str, Schema] = dict(options.get('field_schemas') or {})

    def set_field_schemas(self, field_schemas: Mapping[str, Schema]) -> 'ObjectSchema':
        """
        Configure one schema per field.

        Example:
            schema.set_field_schemas({
                'a': Schema.number(),
                'b': Schema.string().set_default(''),
                'd': Schema.object().set_field_schemas({
                    'da': Schema.number_array().set_default([1]),
                }),
            })
        """
        self.field_schemas = dict(field_schemas)
        return self

    def merge(self, other: 'ObjectSchema') -> 'ObjectSchema':
        """
        Copy the field schemas of another ObjectSchema into this one.

        On a name collision the incoming schema replaces the existing one.
        """
        if not isinstance(other, ObjectSchema):
            raise ConfigurationError(
                f"Can only merge an ObjectSchema, got {type(other).__name__}",
                details={'actual_type': type(other).__name__}
            )
        overridden = set(self.field_schemas) & set(other.field_schemas)
        if overridden:
            logger.debug(f"Merge replaces field schemas: {sorted(overridden)}")
        self.field_schemas.update(other.field_schemas)
        return self

    def _config_problems(self) -> List[str]:
        problems = []
        for name, child in self.field_schemas.items():
            problems.extend(_child_problems(f"field '{name}'", child))
        return problems

    def _evaluate(self, value: Any, context: ValidationContext) -> ValidationResult:
        if value is None:
            value = {}
        if not is_mapping(value):
            return context.reject(f"expected object, got {classify(value).value}")
        if not context.within_limits(len(value)):
            return REJECTED

        if self._custom_predicate is not None:
            if self._custom_predicate(value):
                return ValidationResult(True, dict(value))
            return context.reject("rejected by custom predicate")

        sanitized = {}
        for name, field_schema in self.field_schemas.items():
            with context.descend(name):
                accepted, field_value = field_schema._validate(value.get(name), context)
                if not accepted:
                    return context.reject(f"field '{name}' rejected")
            if field_value is not ABSENT:
                sanitized[name] = field_value
        return ValidationResult(True, sanitized)


class _ArraySchema(Schema):
    """Shared input handling for composite array schemas."""

    def _evaluate(self, value: Any, context: ValidationContext) -> ValidationResult:
        if value is None:
            value = []
        if not is_array(value):
            return context.reject(f"expected array, got {classify(value).value}")
        if not context.within_limits(len(value)):
            return REJECTED

        if self._custom_predicate is not None:
            if self._custom_predicate(value):
                return ValidationResult(True, list(value))
            return context.reject("rejected by custom predicate")

        sanitized = []
        for index, item in enumerate(value):
            with context.descend(index):
                item_value = self._validate_item(item, context)
                if item_value is ABSENT:
                    return context.reject("element rejected")
            sanitized.append(item_value)
        return ValidationResult(True, sanitized)

    def _validate_item(self, item: Any, context: ValidationContext) -> Any:
        """Return the sanitized element, or ABSENT if it is not accepted."""
        raise NotImplementedError


class ObjectArraySchema(_ArraySchema):
    """
    Validates arrays whose every element passes one item ObjectSchema.

    An element is only accepted with a value; an item schema answering
    (True, ABSENT) for an element rejects it. Without an item schema any
    element is rejected.
    """

    kind = SchemaKind.OBJECT_ARRAY

    def __init__(self, **options):
        super().__init__(**options)
        self.item_schema: Optional[ObjectSchema] = options.get('schema')

    def set_schema(self, schema: ObjectSchema) -> 'ObjectArraySchema':
        self.item_schema = schema
        return self

    def _config_problems(self) -> List[str]:
        if self.item_schema is None:
            return []
        if not isinstance(self.item_schema, ObjectSchema):
            return [f"item schema is not an ObjectSchema: {self.item_schema!r}"]
        return _child_problems("item schema", self.item_schema)

    def _validate_item(self, item: Any, context: ValidationContext) -> Any:
        if self.item_schema is None:
            context.reject("no item schema configured")
            return ABSENT
        accepted, item_value = self.item_schema._validate(item, context)
        if not accepted:
            return ABSENT
        return item_value


class MixedArraySchema(_ArraySchema):
    """
    Validates arrays of heterogeneous elements against ordered alternatives.

    Each element takes the value of the first alternative, in declared
    order, that accepts it with a value. Overlapping alternatives are
    resolved by order, not specificity.
    """

    kind = SchemaKind.MIXED_ARRAY

    def __init__(self, **options):
        super().__init__(**options)
        self.alternatives: List[Schema] = list(options.get('schemas') or [])

    def set_schemas(self, schemas: Iterable[Schema]) -> 'MixedArraySchema':
        """
        Set the candidate schemas, tried in order for every element.

        Example:
            schema.set_schemas([
                Schema.number().set_range([1, 2, 3]),
                Schema.object(),
            ])
        """
        self.alternatives = list(schemas)
        return self

    def _config_problems(self) -> List[str]:
        problems = []
        if not self.alternatives:
            problems.append("no alternatives configured")
        for position, child in enumerate(self.alternatives):
            problems.extend(_child_problems(f"alternative {position}", child))
        return problems

    def _validate_item(self, item: Any, context: ValidationContext) -> Any:
        for alternative in self.alternatives:
            accepted, item_value = alternative._validate(item, context)
            if accepted and item_value is not ABSENT:
                # Failures recorded by earlier alternatives no longer apply
                context.clear_failure()
                return item_value
        context.clear_failure()
        context.reject(f"none of {len(self.alternatives)} alternatives accepted the element")
        return ABSENT
