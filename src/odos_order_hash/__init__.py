from .engine.encoder import TypedDataHasher, hash_typed_data
from .engine.exceptions import (
    TypedDataError,
    SchemaError,
    UndefinedTypeError,
    CyclicTypeError,
    ValueShapeError,
    ConfigurationError,
    OracleError,
)
from .schemas import EIP712Domain, FieldDescriptor, TypeSchema, parse_type_ref

__all__ = [
    "TypedDataHasher",
    "hash_typed_data",
    "TypedDataError",
    "SchemaError",
    "UndefinedTypeError",
    "CyclicTypeError",
    "ValueShapeError",
    "ConfigurationError",
    "OracleError",
    "EIP712Domain",
    "FieldDescriptor",
    "TypeSchema",
    "parse_type_ref",
]
