from .bases import CanonicalModel
from .types import (
    EIP712_DOMAIN_TYPE,
    ArrayType,
    FieldDescriptor,
    PrimitiveType,
    StructRef,
    TypeRef,
    TypeSchema,
    parse_type_ref,
)
from .domain import DOMAIN_FIELD_TYPES, EIP712Domain

__all__ = [
    "CanonicalModel",
    "EIP712_DOMAIN_TYPE",
    "ArrayType",
    "FieldDescriptor",
    "PrimitiveType",
    "StructRef",
    "TypeRef",
    "TypeSchema",
    "parse_type_ref",
    "DOMAIN_FIELD_TYPES",
    "EIP712Domain",
]
