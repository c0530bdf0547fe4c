"""
Validation results, the ABSENT sentinel and per-call validation state.
"""
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, List, NamedTuple, Optional, Tuple, Union
from utils.logging_config import get_logger

logger = get_logger(__name__)

PathKey = Union[str, int]


class _AbsentType:
    """Singleton marking "no value to report"; distinct from None."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'ABSENT'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_AbsentType, ())


ABSENT = _AbsentType()


class ValidationResult(NamedTuple):
    """Outcome of Schema.validate; unpacks as (accepted, value)."""
    accepted: bool
    value: Any = ABSENT

    @property
    def is_absent(self) -> bool:
        return self.value is ABSENT


REJECTED = ValidationResult(False, ABSENT)


def format_path(path: Tuple[PathKey, ...]) -> str:
    """Render a path such as ('a', 0, 'b') as '$.a[0].b'."""
    rendered = '$'
    for key in path:
        if isinstance(key, int):
            rendered += f'[{key}]'
        else:
            rendered += f'.{key}'
    return rendered


@dataclass
class ValidationReport:
    """Validation outcome plus where and why it failed."""
    accepted: bool
    value: Any = ABSENT
    path: Tuple[PathKey, ...] = ()
    reason: Optional[str] = None

    @property
    def location(self) -> str:
        return format_path(self.path)

    def as_result(self) -> ValidationResult:
        return ValidationResult(self.accepted, self.value)


@dataclass
class ValidationContext:
    """
    Scratch state for one top-level validation call.

    A fresh context is built for every call and never stored on a schema,
    which keeps concurrent validation of one schema tree safe.
    """
    max_depth: int = 64
    max_elements: int = 0
    path: List[PathKey] = field(default_factory=list)
    failure: Optional[Tuple[Tuple[PathKey, ...], str]] = None

    @classmethod
    def from_settings(cls, settings) -> 'ValidationContext':
        return cls(max_depth=settings.max_depth, max_elements=settings.max_elements)

    @property
    def depth(self) -> int:
        return len(self.path)

    @contextmanager
    def descend(self, key: PathKey):
        """Push a path segment for the duration of a child validation."""
        self.path.append(key)
        try:
            yield self
        finally:
            self.path.pop()

    def reject(self, reason: str) -> ValidationResult:
        """Record the first failure (the innermost one) and return a rejection."""
        if self.failure is None:
            self.failure = (tuple(self.path), reason)
            logger.debug(f"Rejected at {format_path(self.failure[0])}: {reason}")
        return REJECTED

    def clear_failure(self):
        self.failure = None

    def within_limits(self, size: int) -> bool:
        """Check nesting depth and container size against the configured ceilings."""
        if self.depth > self.max_depth:
            logger.warning(
                f"Maximum nesting depth {self.max_depth} exceeded at {format_path(tuple(self.path))}"
            )
            self.reject(f"nesting deeper than {self.max_depth}")
            return False
        return self.within_size(size)

    def within_size(self, size: int) -> bool:
        """Check an array or object length against max_elements."""
        if self.max_elements and size > self.max_elements:
            logger.warning(
                f"Container with {size} entries exceeds limit {self.max_elements} "
                f"at {format_path(tuple(self.path))}"
            )
            self.reject(f"more than {self.max_elements} entries")
            return False
        return True

    def report(self, result: ValidationResult) -> ValidationReport:
        if result.accepted:
            return ValidationReport(True, result.value)
        path, reason = self.failure or ((), 'rejected')
        return ValidationReport(False, ABSENT, path, reason)
