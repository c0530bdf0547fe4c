"""
Base schema and the scalar schema variants.

Schemas are assembled with keyword options and fluent setters, then
validated any number of times. Setters are build-time only: calling them
while another thread validates the same instance is not supported.
Validation itself never mutates a schema.
"""
import sys
from typing import Any, Callable, Iterable, List, Optional
from config.settings import get_settings
from utils.logging_config import get_logger
from utils.exceptions import ConfigurationError, ValidationError
from .result import ABSENT, REJECTED, ValidationContext, ValidationReport, ValidationResult
from .type_checking import SchemaKind, ValueKind, is_array, is_nil
from .validators import (
    BoundsPredicate,
    CompositePredicate,
    EachPredicate,
    KindPredicate,
    MembershipPredicate,
    Predicate,
    TruthyPredicate
)

logger = get_logger(__name__)


def _create(kind: SchemaKind, options: dict) -> 'Schema':
    from .factory import SchemaFactory
    return SchemaFactory.create(kind, **options)


class Schema:
    """
    Base schema: default value, required flag and a pluggable predicate.

    Options:
        default_value: Returned when the input is None. Recognized by
            presence, so None, 0, '' and False are real defaults.
        required: When False, a missing value is accepted as ABSENT.
        validate: Custom predicate replacing the built-in rule.

    Options a variant does not use are ignored.
    """

    kind = SchemaKind.ANY

    def __init__(self, **options):
        self.has_default = False
        self.default_value = None
        if 'default_value' in options:
            self.has_default = True
            self.default_value = options['default_value']
        self.required = True
        self.set_required(options.get('required'))
        self._custom_predicate: Optional[Callable[[Any], bool]] = options.get('validate')

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value!r}, required={self.required})"

    @property
    def uses_custom_predicate(self) -> bool:
        return self._custom_predicate is not None

    def set_default(self, default_value: Any) -> 'Schema':
        """Set the value returned when the input is None."""
        self.has_default = True
        self.default_value = default_value
        return self

    def set_validate(self, validate: Callable[[Any], bool]) -> 'Schema':
        """Install a custom predicate; the built-in rule is no longer consulted."""
        self._custom_predicate = validate
        return self

    def set_required(self, required: bool) -> 'Schema':
        """Mark the value as required; non-boolean arguments are ignored."""
        if isinstance(required, bool):
            self.required = required
        return self

    def validate(self, value: Any = None) -> ValidationResult:
        """
        Validate a value.

        Returns:
            (True, value) when accepted, (True, ABSENT) when an optional value
            is missing, (False, ABSENT) when rejected.

        Example:
            accepted, result = schema.validate({'x': 1})
        """
        return self._run(value)[0]

    def explain(self, value: Any = None) -> ValidationReport:
        """Validate a value and report the path and reason of the first failure."""
        result, context = self._run(value)
        return context.report(result)

    def _run(self, value: Any):
        context = ValidationContext.from_settings(get_settings())
        try:
            return self._validate(value, context), context
        except RecursionError:
            # Interpreter stack exhausted before max_depth was reached
            logger.warning(f"Recursion limit reached while validating with {self!r}")
            context.clear_failure()
            return context.reject("nesting too deep to validate"), context

    def validate_or_raise(self, value: Any = None) -> Any:
        """Return the sanitized value, raising ValidationError on rejection."""
        report = self.explain(value)
        if not report.accepted:
            raise ValidationError(
                f"Validation failed at {report.location}: {report.reason}",
                details={
                    'path': list(report.path),
                    'reason': report.reason,
                    'schema_kind': self.kind.value
                }
            )
        return report.value

    def check_config(self) -> 'Schema':
        """Raise ConfigurationError if the schema can never accept a value as configured."""
        problems = self._config_problems()
        if problems:
            logger.debug(f"{self!r} has {len(problems)} configuration problem(s)")
            raise ConfigurationError(
                f"Inconsistent {self.kind.value} schema: {'; '.join(problems)}",
                details={'problems': problems}
            )
        return self

    def _config_problems(self) -> List[str]:
        return []

    def _validate(self, value: Any, context: ValidationContext) -> ValidationResult:
        if is_nil(value):
            if self.has_default:
                return ValidationResult(True, self.default_value)
            if not self.required:
                return ValidationResult(True, ABSENT)
            # Required without default: the predicate still sees the value
            value = None
        return self._evaluate(value, context)

    def _evaluate(self, value: Any, context: ValidationContext) -> ValidationResult:
        if self._custom_predicate is not None:
            if self._custom_predicate(value):
                return ValidationResult(True, value)
            return context.reject("rejected by custom predicate")

        reason = self._rule().first_failure(value)
        if reason is None:
            return ValidationResult(True, value)
        return context.reject(reason)

    def _rule(self) -> Predicate:
        """Built-in rule, derived from the current constraint state."""
        return TruthyPredicate()

    @staticmethod
    def string(**options) -> 'StringSchema':
        """Create a StringSchema (options: default_value, required, validate, range)."""
        return _create(SchemaKind.STRING, options)

    @staticmethod
    def string_array(**options) -> 'StringArraySchema':
        return _create(SchemaKind.STRING_ARRAY, options)

    @staticmethod
    def number(**options) -> 'NumberSchema':
        """Create a NumberSchema (options: default_value, required, validate, min, max, range)."""
        return _create(SchemaKind.NUMBER, options)

    @staticmethod
    def number_array(**options) -> 'NumberArraySchema':
        return _create(SchemaKind.NUMBER_ARRAY, options)

    @staticmethod
    def boolean(**options) -> 'BooleanSchema':
        return _create(SchemaKind.BOOLEAN, options)

    @staticmethod
    def boolean_array(**options) -> 'BooleanArraySchema':
        return _create(SchemaKind.BOOLEAN_ARRAY, options)

    @staticmethod
    def object(**options) -> 'ObjectSchema':
        """Create an ObjectSchema (options: default_value, required, validate, field_schemas)."""
        return _create(SchemaKind.OBJECT, options)

    @staticmethod
    def object_array(**options) -> 'ObjectArraySchema':
        """Create an ObjectArraySchema (options: default_value, required, validate, schema)."""
        return _create(SchemaKind.OBJECT_ARRAY, options)

    @staticmethod
    def array(**options) -> 'MixedArraySchema':
        """Create a MixedArraySchema (options: default_value, required, validate, schemas)."""
        return _create(SchemaKind.MIXED_ARRAY, options)


def _copy_range(range_values: Optional[Iterable[Any]]) -> Optional[List[Any]]:
    if range_values is None:
        return None
    # A bare string would otherwise become a range of its characters
    if isinstance(range_values, str):
        raise ConfigurationError(
            f"range must be a collection of values, got the string {range_values!r}",
            details={'range': range_values}
        )
    return list(range_values)


class _SizeLimitedArray:
    """Applies the max_elements ceiling to scalar arrays before the element rule."""

    def _evaluate(self, value: Any, context: ValidationContext) -> ValidationResult:
        if is_array(value) and not context.within_size(len(value)):
            return REJECTED
        return super()._evaluate(value, context)


class StringSchema(Schema):
    """Accepts strings, optionally restricted to a set of allowed values."""

    kind = SchemaKind.STRING

    def __init__(self, **options):
        super().__init__(**options)
        self.range = _copy_range(options.get('range'))

    def set_range(self, range_values: Iterable[str]) -> 'StringSchema':
        """
        Restrict accepted strings to range_values.

        Example:
            schema.set_range(['a', 'b'])
        """
        self.range = _copy_range(range_values)
        return self

    def _config_problems(self) -> List[str]:
        if self.range is not None and not self.range:
            return ["range is empty"]
        return []

    def _item_rule(self) -> Predicate:
        rules = [KindPredicate(ValueKind.STRING)]
        if self.range is not None:
            rules.append(MembershipPredicate(self.range))
        return CompositePredicate(*rules)

    def _rule(self) -> Predicate:
        return self._item_rule()


class StringArraySchema(_SizeLimitedArray, StringSchema):
    """Accepts arrays of strings; range applies to every element."""

    kind = SchemaKind.STRING_ARRAY

    def _rule(self) -> Predicate:
        return EachPredicate(self._item_rule())


class NumberSchema(Schema):
    """
    Accepts numbers within [min, max], or within range when one is set.

    min defaults to 0 and max to the largest float. A configured range
    replaces the bounds check entirely.
    """

    kind = SchemaKind.NUMBER

    def __init__(self, **options):
        super().__init__(**options)
        self.min = 0
        self.max = sys.float_info.max
        if options.get('min') is not None:
            self.min = options['min']
        if options.get('max') is not None:
            self.max = options['max']
        self.range = _copy_range(options.get('range'))

    def set_min(self, min_value: float) -> 'NumberSchema':
        self.min = min_value
        return self

    def set_max(self, max_value: float) -> 'NumberSchema':
        self.max = max_value
        return self

    def set_range(self, range_values: Iterable[float]) -> 'NumberSchema':
        """
        Restrict accepted numbers to range_values, ignoring min and max.

        Example:
            schema.set_range([0, 1, 2])
        """
        self.range = _copy_range(range_values)
        return self

    def _config_problems(self) -> List[str]:
        problems = []
        if self.range is not None:
            if not self.range:
                problems.append("range is empty")
        elif self.min > self.max:
            problems.append(f"min {self.min} is greater than max {self.max}")
        return problems

    def _item_rule(self) -> Predicate:
        if self.range is not None:
            bound = MembershipPredicate(self.range)
        else:
            bound = BoundsPredicate(self.min, self.max)
        return CompositePredicate(KindPredicate(ValueKind.NUMBER), bound)

    def _rule(self) -> Predicate:
        return self._item_rule()


class NumberArraySchema(_SizeLimitedArray, NumberSchema):
    """Accepts arrays of numbers; min, max and range apply to every element."""

    kind = SchemaKind.NUMBER_ARRAY

    def _rule(self) -> Predicate:
        return EachPredicate(self._item_rule())


class BooleanSchema(Schema):
    kind = SchemaKind.BOOLEAN

    def _rule(self) -> Predicate:
        return KindPredicate(ValueKind.BOOLEAN)


class BooleanArraySchema(_SizeLimitedArray, Schema):
    kind = SchemaKind.BOOLEAN_ARRAY

    def _rule(self) -> Predicate:
        return EachPredicate(KindPredicate(ValueKind.BOOLEAN))
