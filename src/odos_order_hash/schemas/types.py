"""
EIP-712 Type Schema Models

Strongly-typed representation of an EIP-712 type schema. Type strings such
as ``"uint256"``, ``"TokenInfo"`` or ``"TokenInfo[]"`` are parsed once, at
construction, into a tagged union:

    - PrimitiveType (kind="primitive"): address, bool, string, bytes, bytesN,
      uintN, intN
    - StructRef     (kind="struct"):    reference to a struct defined in the schema
    - ArrayType     (kind="array"):     dynamic ``T[]`` or fixed ``T[k]`` over a TypeRef

Pydantic's discriminated union selects the right model from ``kind``, so a
schema serialized with ``model_dump()`` validates back into the same shape.

``TypeSchema`` checks referential integrity when it is built: every
referenced struct must be defined and struct references must not form a
cycle. A schema that constructs successfully can always be hashed.

Example usage:
    schema = TypeSchema.from_types({
        "TokenInfo": [
            {"name": "tokenAddress", "type": "address"},
            {"name": "tokenAmount", "type": "uint256"},
        ],
        "MultiLimitOrder": [
            {"name": "inputs", "type": "TokenInfo[]"},
            ...
        ],
    })
    schema.dependencies("MultiLimitOrder")   # ["TokenInfo"]
    schema.primary_type                      # "MultiLimitOrder"
"""

import re
from typing import Dict, List, Literal, Mapping, Optional, Sequence, Tuple, Union

from pydantic import Field, ValidationError, field_validator, model_validator
from typing_extensions import Annotated

from .bases import CanonicalModel
from ..engine.exceptions import CyclicTypeError, SchemaError, UndefinedTypeError


#: Name of the built-in domain struct. Its fields are derived from the domain record.
EIP712_DOMAIN_TYPE = "EIP712Domain"

_ARRAY_RE = re.compile(r"^(.+)\[(\d*)\]$")
_INT_RE = re.compile(r"^(u?int)(\d+)$")
_FIXED_BYTES_RE = re.compile(r"^bytes(\d+)$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class PrimitiveType(CanonicalModel):
    """
    Leaf type of the schema.

    Attributes:
        kind: Always ``"primitive"``.
        base: Solidity base type name.
        size: Bit width for ``uint``/``int`` (8..256, multiple of 8), byte
              length for fixed ``bytesN`` (1..32), ``None`` otherwise.
    """

    kind: Literal["primitive"] = "primitive"
    base: Literal["address", "bool", "string", "bytes", "uint", "int"]
    size: Optional[int] = None

    @model_validator(mode="after")
    def _check_size(self) -> "PrimitiveType":
        if self.base in ("uint", "int"):
            if self.size is None or self.size % 8 != 0 or not 8 <= self.size <= 256:
                raise SchemaError(f"Invalid integer width for {self.base}{self.size or ''}")
        elif self.base == "bytes":
            if self.size is not None and not 1 <= self.size <= 32:
                raise SchemaError(f"Invalid fixed bytes length: bytes{self.size}")
        elif self.size is not None:
            raise SchemaError(f"Type {self.base} does not take a size")
        return self

    @property
    def canonical(self) -> str:
        if self.size is None:
            return self.base
        return f"{self.base}{self.size}"

    @property
    def is_dynamic(self) -> bool:
        """``string`` and ``bytes`` are hashed rather than padded."""
        return self.base == "string" or (self.base == "bytes" and self.size is None)


class StructRef(CanonicalModel):
    """Reference to a struct type by name."""

    kind: Literal["struct"] = "struct"
    name: str

    @property
    def canonical(self) -> str:
        return self.name


class ArrayType(CanonicalModel):
    """
    Array over another type.

    Attributes:
        kind: Always ``"array"``.
        element: Element type (may itself be an array).
        length: Fixed length for ``T[k]``; ``None`` for dynamic ``T[]``.
    """

    kind: Literal["array"] = "array"
    element: "TypeRef"
    length: Optional[int] = Field(default=None, ge=1)

    @property
    def canonical(self) -> str:
        return f"{self.element.canonical}[{'' if self.length is None else self.length}]"


# Discriminated Union for schema type references
# Automatically selects correct model based on 'kind' field value
TypeRef = Annotated[
    Union[
        PrimitiveType,  # kind: "primitive"
        StructRef,      # kind: "struct"
        ArrayType,      # kind: "array"
    ],
    Field(discriminator="kind"),
]

ArrayType.model_rebuild()


def parse_type_ref(type_string: str) -> TypeRef:
    """
    Parse an EIP-712 type string into a ``TypeRef``.

    Args:
        type_string: Type as written in a typed-data ``types`` section,
                     e.g. ``"uint256"``, ``"bytes32"``, ``"TokenInfo[]"``,
                     ``"uint8[3][]"``.

    Returns:
        The parsed ``TypeRef``.

    Raises:
        SchemaError: If the string is not a valid type. Bare ``uint`` and
            ``int`` are rejected: the width is part of the type string that
            gets hashed, so it has to be spelled out.
    """
    if not isinstance(type_string, str) or not type_string:
        raise SchemaError(f"Invalid type string: {type_string!r}")

    array_match = _ARRAY_RE.match(type_string)
    if array_match:
        element = parse_type_ref(array_match.group(1))
        length = int(array_match.group(2)) if array_match.group(2) else None
        if length == 0:
            raise SchemaError(f"Fixed array length must be positive: {type_string}")
        return ArrayType(element=element, length=length)

    if type_string in ("address", "bool", "string", "bytes"):
        return PrimitiveType(base=type_string)

    if type_string in ("uint", "int"):
        raise SchemaError(f"Type {type_string} must declare a bit width (e.g. {type_string}256)")

    int_match = _INT_RE.match(type_string)
    if int_match:
        return PrimitiveType(base=int_match.group(1), size=int(int_match.group(2)))

    bytes_match = _FIXED_BYTES_RE.match(type_string)
    if bytes_match:
        return PrimitiveType(base="bytes", size=int(bytes_match.group(1)))

    if _IDENTIFIER_RE.match(type_string):
        return StructRef(name=type_string)

    raise SchemaError(f"Invalid type string: {type_string!r}")


def base_struct_name(type_ref: TypeRef) -> Optional[str]:
    """Return the struct name at the bottom of ``type_ref``, if any."""
    while isinstance(type_ref, ArrayType):
        type_ref = type_ref.element
    if isinstance(type_ref, StructRef):
        return type_ref.name
    return None


class FieldDescriptor(CanonicalModel):
    """
    A named, typed struct member.

    ``type`` accepts either a ``TypeRef`` model or a type string, which is
    parsed with ``parse_type_ref``.
    """

    name: str
    type: TypeRef

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type_string(cls, value):
        if isinstance(value, str):
            return parse_type_ref(value)
        return value

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise SchemaError(f"Invalid field name: {value!r}")
        return value

    @property
    def signature(self) -> str:
        """Member as it appears inside a type signature, e.g. ``uint256 salt``."""
        return f"{self.type.canonical} {self.name}"


class TypeSchema(CanonicalModel):
    """
    Immutable mapping of struct name to its ordered fields.

    Only the field order inside each struct is significant; the order in
    which struct definitions are inserted into ``types`` has no effect on
    any hash derived from the schema.

    Attributes:
        types: Struct name -> ordered field descriptors.

    Raises:
        SchemaError: On invalid struct or field names, duplicate fields or
            empty structs.
        UndefinedTypeError: If a field references an undefined struct.
        CyclicTypeError: If struct references form a cycle.
    """

    types: Dict[str, Tuple[FieldDescriptor, ...]]

    @model_validator(mode="after")
    def _check_integrity(self) -> "TypeSchema":
        for struct_name, fields in self.types.items():
            if not _IDENTIFIER_RE.match(struct_name):
                raise SchemaError(f"Invalid struct name: {struct_name!r}")
            if not fields:
                raise SchemaError(f"Struct {struct_name} must declare at least one field")
            seen = set()
            for field in fields:
                if field.name in seen:
                    raise SchemaError(f"Duplicate field {field.name!r} in struct {struct_name}")
                seen.add(field.name)
                referenced = base_struct_name(field.type)
                if referenced is not None and referenced not in self.types:
                    raise UndefinedTypeError(
                        f"Struct {struct_name} references undefined type {referenced!r} "
                        f"(field {field.name!r})"
                    )
        self._check_acyclic()
        return self

    def _check_acyclic(self) -> None:
        # Iterative three-colour DFS; grey nodes on the current path mark a cycle.
        state: Dict[str, int] = {}
        for root in sorted(self.types):
            if state.get(root):
                continue
            path: List[str] = [root]
            stack = [iter(self.direct_references(root))]
            state[root] = 1
            while stack:
                child = next(stack[-1], None)
                if child is None:
                    state[path.pop()] = 2
                    stack.pop()
                    continue
                if state.get(child) == 1:
                    raise CyclicTypeError(path[path.index(child):] + [child])
                if not state.get(child):
                    state[child] = 1
                    path.append(child)
                    stack.append(iter(self.direct_references(child)))

    @classmethod
    def from_types(cls, types: Mapping[str, Sequence[Mapping[str, str]]]) -> "TypeSchema":
        """
        Build a schema from the conventional typed-data ``types`` literal.

        An ``EIP712Domain`` entry is discarded: the domain struct is always
        derived from the fields present in the domain record.

        Raises:
            SchemaError: If the literal is malformed or the schema is inconsistent.
        """
        if not isinstance(types, Mapping):
            raise SchemaError(f"Type schema must be a mapping, got {type(types).__name__}")

        parsed: Dict[str, Tuple[FieldDescriptor, ...]] = {}
        for struct_name, members in types.items():
            if struct_name == EIP712_DOMAIN_TYPE:
                continue
            if isinstance(members, (str, bytes)) or not isinstance(members, Sequence):
                raise SchemaError(f"Fields of struct {struct_name} must be a list")
            fields = []
            for member in members:
                if not isinstance(member, Mapping) or set(member) != {"name", "type"}:
                    raise SchemaError(
                        f"Field of struct {struct_name} must have exactly 'name' and 'type': {member!r}"
                    )
                try:
                    fields.append(FieldDescriptor(name=member["name"], type=member["type"]))
                except ValidationError as exc:
                    raise SchemaError(f"Invalid field in struct {struct_name}: {exc}") from exc
            parsed[struct_name] = tuple(fields)

        try:
            return cls(types=parsed)
        except ValidationError as exc:
            raise SchemaError(f"Invalid type schema: {exc}") from exc

    def to_types(self) -> Dict[str, List[Dict[str, str]]]:
        """Return the schema as a typed-data ``types`` literal."""
        return {
            struct_name: [{"name": f.name, "type": f.type.canonical} for f in fields]
            for struct_name, fields in self.types.items()
        }

    def fields_of(self, struct_name: str) -> Tuple[FieldDescriptor, ...]:
        try:
            return self.types[struct_name]
        except KeyError:
            raise UndefinedTypeError(f"Undefined struct type: {struct_name!r}") from None

    def direct_references(self, struct_name: str) -> List[str]:
        """Struct names referenced by the fields of ``struct_name``, in field order."""
        names = []
        for field in self.fields_of(struct_name):
            referenced = base_struct_name(field.type)
            if referenced is not None and referenced not in names:
                names.append(referenced)
        return names

    def dependencies(self, struct_name: str) -> List[str]:
        """
        All struct names transitively referenced by ``struct_name``, sorted
        by name and excluding ``struct_name`` itself.
        """
        found = set()
        pending = [struct_name]
        while pending:
            for child in self.direct_references(pending.pop()):
                if child not in found:
                    found.add(child)
                    pending.append(child)
        found.discard(struct_name)
        return sorted(found)

    @property
    def primary_type(self) -> str:
        """
        The single struct that no other struct references.

        Raises:
            SchemaError: If there is no such struct or more than one.
        """
        referenced = set()
        for struct_name in self.types:
            referenced.update(self.direct_references(struct_name))
        candidates = sorted(name for name in self.types if name not in referenced)
        if len(candidates) != 1:
            raise SchemaError(
                f"Cannot infer primary type; candidates: {candidates or 'none'}"
            )
        return candidates[0]
