"""
EIP-712 Domain Model

The domain binds a digest to one application, version, chain and
verifying contract. Contracts may omit members they do not use; the
``EIP712Domain`` struct hashed for the separator contains exactly the
members that are present, always in the canonical order below.
"""

from typing import Any, Dict, Optional, Tuple

from eth_utils import to_checksum_address
from pydantic import ConfigDict, StrictStr, field_validator, model_validator

from .bases import CanonicalModel
from .types import EIP712_DOMAIN_TYPE, FieldDescriptor
from ..engine.exceptions import SchemaError
from ..engine.values import parse_address, parse_bytes, parse_int


#: Canonical member order and types of the ``EIP712Domain`` struct.
DOMAIN_FIELD_TYPES: Tuple[Tuple[str, str], ...] = (
    ("name", "string"),
    ("version", "string"),
    ("chainId", "uint256"),
    ("verifyingContract", "address"),
    ("salt", "bytes32"),
)


class EIP712Domain(CanonicalModel):
    """
    EIP-712 domain separator record.
    Used to prevent signature replay across domains.

    Attributes:
        name: Human-readable signing domain (e.g. ``"OdosLimitOrderRouter"``).
        version: Current major version of the signing domain.
        chainId: EIP-155 chain id. Accepts the same integer forms as a
                 ``uint256`` message field; ``bool`` is rejected.
        verifyingContract: Address of the contract that verifies the digest,
                 given as 20 bytes or a hex string and stored checksummed.
        salt: Optional 32-byte disambiguating salt (bytes or 0x-hex string),
              stored as a 0x-hex string.

    Example::

        domain = EIP712Domain(
            name="OdosLimitOrderRouter",
            version="1",
            chainId=31337,
            verifyingContract="0x5FbDB2315678afecb367f032d93F642f64180aa3",
        )
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    name: Optional[StrictStr] = None
    version: Optional[StrictStr] = None
    chainId: Optional[int] = None
    verifyingContract: Optional[str] = None
    salt: Optional[str] = None

    @field_validator("chainId", mode="before")
    @classmethod
    def _parse_chain_id(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        chain_id = parse_int(value, [EIP712_DOMAIN_TYPE, "chainId"])
        if not 0 <= chain_id < 2 ** 256:
            raise SchemaError(f"value {chain_id} out of range for uint256", [EIP712_DOMAIN_TYPE, "chainId"])
        return chain_id

    @field_validator("verifyingContract", mode="before")
    @classmethod
    def _parse_verifying_contract(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return to_checksum_address(parse_address(value, [EIP712_DOMAIN_TYPE, "verifyingContract"]))

    @field_validator("salt", mode="before")
    @classmethod
    def _parse_salt(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        raw = parse_bytes(value, [EIP712_DOMAIN_TYPE, "salt"])
        if len(raw) != 32:
            raise SchemaError(f"expected 32 bytes for bytes32, got {len(raw)}", [EIP712_DOMAIN_TYPE, "salt"])
        return "0x" + raw.hex()

    @model_validator(mode="after")
    def _check_not_empty(self) -> "EIP712Domain":
        if all(getattr(self, member) is None for member, _ in DOMAIN_FIELD_TYPES):
            raise SchemaError("EIP712Domain must set at least one member")
        return self

    def eip712_fields(self) -> Tuple[FieldDescriptor, ...]:
        """Field descriptors of the ``EIP712Domain`` struct for the members present."""
        return tuple(
            FieldDescriptor(name=member, type=type_string)
            for member, type_string in DOMAIN_FIELD_TYPES
            if getattr(self, member) is not None
        )

    def to_dict(self) -> Dict[str, Any]:
        """Present members only, keyed by their EIP-712 names."""
        return {
            member: getattr(self, member)
            for member, _ in DOMAIN_FIELD_TYPES
            if getattr(self, member) is not None
        }
