"""
Registry-backed construction of schemas by kind.
"""
from typing import Dict, List, Type, Union
from utils.logging_config import get_logger
from utils.exceptions import ConfigurationError
from .schema import (
    Schema,
    StringSchema,
    StringArraySchema,
    NumberSchema,
    NumberArraySchema,
    BooleanSchema,
    BooleanArraySchema
)
from .composite import ObjectSchema, ObjectArraySchema, MixedArraySchema
from .type_checking import SchemaKind

logger = get_logger(__name__)


class SchemaFactory:
    """Creates schema instances from a kind tag."""

    _registry: Dict[SchemaKind, Type[Schema]] = {}

    @classmethod
    def register(cls, kind: SchemaKind, implementation: Type[Schema]):
        """Register the schema class built for a kind."""
        cls._registry[kind] = implementation
        logger.debug(f"Registered {implementation.__name__} for kind '{kind.value}'")

    @classmethod
    def create(cls, kind: Union[SchemaKind, str], **options) -> Schema:
        """
        Create a schema of the given kind.

        Args:
            kind: A SchemaKind or its tag, e.g. 'number[]'
            **options: Construction options; unused ones are ignored
        """
        try:
            kind = SchemaKind(kind)
        except ValueError:
            raise ConfigurationError(
                f"Unknown schema kind: {kind}",
                details={'available_kinds': cls.list_available()}
            )
        if kind not in cls._registry:
            raise ConfigurationError(
                f"No schema registered for kind: {kind.value}",
                details={'available_kinds': cls.list_available()}
            )
        return cls._registry[kind](**options)

    @classmethod
    def list_available(cls) -> List[str]:
        """List the registered kind tags."""
        return [kind.value for kind in cls._registry]


for _implementation in (
    StringSchema,
    StringArraySchema,
    NumberSchema,
    NumberArraySchema,
    BooleanSchema,
    BooleanArraySchema,
    ObjectSchema,
    ObjectArraySchema,
    MixedArraySchema,
):
    SchemaFactory.register(_implementation.kind, _implementation)
