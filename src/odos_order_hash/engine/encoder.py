"""
EIP-712 Typed-Data Encoder

Deterministic structured-data hashing for a validated ``TypeSchema``.
All operations are pure and performed in-process; no RPC calls are made.

    encode_type(T)     ->  "T(type1 name1,...)" + sorted referenced signatures
    type_hash(T)       ->  keccak256(encode_type(T))
    encode_data(T, v)  ->  type_hash(T) ++ encode_field(f1) ++ encode_field(f2) ++ ...
    hash_struct(T, v)  ->  keccak256(encode_data(T, v))
    hash(domain, v)    ->  keccak256(0x1901 ++ hash_domain(domain) ++ hash_struct(T, v))

Field encoding (always 32 bytes):
    - address, bool, uintN, intN, bytesN : ABI static encoding via ``eth_abi``
    - string, bytes                      : keccak256 of the raw bytes
    - struct                             : hash_struct of the nested value
    - T[] / T[k]                         : keccak256 of the concatenated element encodings

Values are validated while they are encoded; any mismatch raises
``SchemaError`` carrying the path of the offending value. Nothing is
coerced to a default.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from eth_abi import encode as abi_encode
from eth_utils import keccak
from pydantic import ValidationError

from .exceptions import SchemaError, ValueShapeError
from .logging import get_logger
from .values import parse_address, parse_bytes, parse_int
from ..schemas.domain import EIP712Domain
from ..schemas.types import (
    EIP712_DOMAIN_TYPE,
    ArrayType,
    PrimitiveType,
    StructRef,
    TypeRef,
    TypeSchema,
)

logger = get_logger(__name__)

#: Fixed two-byte prefix of the final digest pre-image ("\x19" + version 0x01).
EIP712_PREFIX = b"\x19\x01"

DomainLike = Union[EIP712Domain, Mapping[str, Any]]
SchemaLike = Union[TypeSchema, Mapping[str, Sequence[Mapping[str, str]]]]


# ---------------------------------------------------------------------------
# Input normalisation
# ---------------------------------------------------------------------------

def as_domain(domain: DomainLike) -> EIP712Domain:
    """Accept an ``EIP712Domain`` or a plain ``{name, version, ...}`` mapping."""
    if isinstance(domain, EIP712Domain):
        return domain
    if not isinstance(domain, Mapping):
        raise SchemaError(f"Domain must be a mapping, got {type(domain).__name__}")
    try:
        return EIP712Domain(**domain)
    except ValidationError as exc:
        raise SchemaError(f"Invalid domain: {exc}") from exc


def as_schema(schema: SchemaLike) -> TypeSchema:
    """Accept a ``TypeSchema`` or a typed-data ``types`` literal."""
    if isinstance(schema, TypeSchema):
        return schema
    return TypeSchema.from_types(schema)


# ---------------------------------------------------------------------------
# Hasher
# ---------------------------------------------------------------------------

class TypedDataHasher:
    """
    EIP-712 hasher bound to one immutable ``TypeSchema``.

    Type hashes are cached per struct name. The cache only ever holds values
    that are a pure function of the schema, so a hasher can be shared between
    callers; two threads racing on the same entry just compute it twice.

    Example::

        hasher = TypedDataHasher(LIMIT_ORDER_SCHEMA)
        digest = hasher.hash(domain, order.to_dict(), "LimitOrder")
    """

    def __init__(self, schema: SchemaLike):
        self.schema = as_schema(schema)
        self._type_hashes: Dict[str, bytes] = {}

    # ---- type encoding ----------------------------------------------------

    def encode_type(self, struct_name: str) -> str:
        """
        Full type string of ``struct_name``: its own signature first, then
        every referenced struct once, sorted by name.
        """
        names = [struct_name] + self.schema.dependencies(struct_name)
        return "".join(
            f"{name}({','.join(field.signature for field in self.schema.fields_of(name))})"
            for name in names
        )

    def type_hash(self, struct_name: str) -> bytes:
        cached = self._type_hashes.get(struct_name)
        if cached is None:
            encoded = self.encode_type(struct_name)
            cached = keccak(text=encoded)
            self._type_hashes[struct_name] = cached
            logger.debug("type hash %s = 0x%s", encoded, cached.hex())
        return cached

    # ---- value encoding ---------------------------------------------------

    def encode_data(self, struct_name: str, value: Any, path: Optional[List[str]] = None) -> bytes:
        """
        ``type_hash(struct_name)`` followed by the 32-byte encoding of every
        field, in declared order.

        Raises:
            ValueShapeError: If ``value`` is not a mapping or its keys differ
                from the declared fields.
            SchemaError: If any field value does not fit its type.
        """
        path = path if path is not None else [struct_name]
        fields = self.schema.fields_of(struct_name)

        if not isinstance(value, Mapping):
            raise ValueShapeError(
                f"expected mapping for struct {struct_name}, got {type(value).__name__}", path
            )
        declared = [field.name for field in fields]
        missing = [name for name in declared if name not in value]
        if missing:
            raise ValueShapeError(f"missing field(s) {missing} for struct {struct_name}", path)
        extra = sorted(str(name) for name in value if name not in declared)
        if extra:
            raise ValueShapeError(f"unexpected field(s) {extra} for struct {struct_name}", path)

        encoded = [self.type_hash(struct_name)]
        for field in fields:
            encoded.append(self.encode_field(field.type, value[field.name], path + [field.name]))
        return b"".join(encoded)

    def encode_field(self, type_ref: TypeRef, value: Any, path: List[str]) -> bytes:
        """Encode one value of ``type_ref`` into exactly 32 bytes."""
        if isinstance(type_ref, StructRef):
            return keccak(self.encode_data(type_ref.name, value, path))

        if isinstance(type_ref, ArrayType):
            if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, Sequence):
                raise ValueShapeError(
                    f"expected sequence for {type_ref.canonical}, got {type(value).__name__}", path
                )
            if type_ref.length is not None and len(value) != type_ref.length:
                raise ValueShapeError(
                    f"expected {type_ref.length} elements for {type_ref.canonical}, got {len(value)}",
                    path,
                )
            return keccak(b"".join(
                self.encode_field(type_ref.element, element, path + [f"[{index}]"])
                for index, element in enumerate(value)
            ))

        return self._encode_primitive(type_ref, value, path)

    def _encode_primitive(self, type_ref: PrimitiveType, value: Any, path: List[str]) -> bytes:
        base = type_ref.base

        if base == "string":
            if not isinstance(value, str):
                raise SchemaError(f"expected string, got {type(value).__name__}", path)
            return keccak(text=value)

        if base == "bytes" and type_ref.size is None:
            return keccak(parse_bytes(value, path))

        if base == "bytes":
            raw = parse_bytes(value, path)
            if len(raw) != type_ref.size:
                raise SchemaError(
                    f"expected {type_ref.size} bytes for {type_ref.canonical}, got {len(raw)}", path
                )
            return abi_encode([type_ref.canonical], [raw])

        if base == "bool":
            if not isinstance(value, bool):
                raise SchemaError(f"expected bool, got {type(value).__name__}", path)
            return abi_encode(["bool"], [value])

        if base == "address":
            return abi_encode(["address"], [parse_address(value, path)])

        number = parse_int(value, path)
        if base == "uint":
            low, high = 0, 2 ** type_ref.size
        else:
            low, high = -(2 ** (type_ref.size - 1)), 2 ** (type_ref.size - 1)
        if not low <= number < high:
            raise SchemaError(f"value {number} out of range for {type_ref.canonical}", path)
        return abi_encode([type_ref.canonical], [number])

    # ---- struct / domain / digest -----------------------------------------

    def hash_struct(self, struct_name: str, value: Any) -> bytes:
        return keccak(self.encode_data(struct_name, value))

    @staticmethod
    def hash_domain(domain: DomainLike) -> bytes:
        """Domain separator: ``hash_struct`` of the domain's own ``EIP712Domain`` struct."""
        domain = as_domain(domain)
        domain_schema = TypeSchema(types={EIP712_DOMAIN_TYPE: domain.eip712_fields()})
        return TypedDataHasher(domain_schema).hash_struct(EIP712_DOMAIN_TYPE, domain.to_dict())

    def resolve_primary_type(self, primary_type: Optional[str]) -> str:
        if primary_type is None:
            return self.schema.primary_type
        self.schema.fields_of(primary_type)
        return primary_type

    def encode(self, domain: DomainLike, value: Any, primary_type: Optional[str] = None) -> bytes:
        """The 66-byte digest pre-image ``0x1901 ++ domainSeparator ++ structHash``."""
        primary_type = self.resolve_primary_type(primary_type)
        return EIP712_PREFIX + self.hash_domain(domain) + self.hash_struct(primary_type, value)

    def hash(self, domain: DomainLike, value: Any, primary_type: Optional[str] = None) -> bytes:
        """
        Final 32-byte EIP-712 digest.

        Args:
            domain:       ``EIP712Domain`` or mapping of its members.
            value:        Value tree for ``primary_type``.
            primary_type: Root struct name; inferred from the schema when ``None``.

        Raises:
            SchemaError: If the value or domain does not conform.
        """
        return keccak(self.encode(domain, value, primary_type))

    def payload(self, domain: DomainLike, value: Any, primary_type: Optional[str] = None) -> Dict[str, Any]:
        """
        ``eth_signTypedData_v4`` payload for the same inputs, compatible with
        ``eth_account.messages.encode_typed_data(full_message=...)``.
        """
        domain = as_domain(domain)
        primary_type = self.resolve_primary_type(primary_type)
        types = {
            EIP712_DOMAIN_TYPE: [
                {"name": f.name, "type": f.type.canonical} for f in domain.eip712_fields()
            ],
        }
        types.update(self.schema.to_types())
        return {
            "types": types,
            "primaryType": primary_type,
            "domain": domain.to_dict(),
            "message": value,
        }


def hash_typed_data(
    domain: DomainLike,
    schema: SchemaLike,
    root_type: Optional[str],
    value: Any,
) -> bytes:
    """
    One-shot EIP-712 digest of ``value`` under ``schema[root_type]``.

    ``root_type`` may be ``None``, in which case the unique struct that no
    other struct references is used.

    Raises:
        SchemaError: If the schema is inconsistent or the value does not conform.
    """
    return TypedDataHasher(schema).hash(domain, value, root_type)
