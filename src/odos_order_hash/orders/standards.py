from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from web3 import Web3

from ..engine.encoder import TypedDataHasher
from ..schemas.domain import EIP712Domain
from ..schemas.types import EIP712_DOMAIN_TYPE


# -----------------------------
# Router domain
# -----------------------------

ROUTER_DOMAIN_NAME = "OdosLimitOrderRouter"
ROUTER_DOMAIN_VERSION = "1"


def build_router_domain(chain_id: int, verifying_contract: str) -> EIP712Domain:
    """
    EIP-712 domain of an ``OdosLimitOrderRouter`` deployment.

    Args:
        chain_id:           EVM network ID the router is deployed on.
        verifying_contract: Router contract address.
    """
    return EIP712Domain(
        name=ROUTER_DOMAIN_NAME,
        version=ROUTER_DOMAIN_VERSION,
        chainId=chain_id,
        verifyingContract=verifying_contract,
    )


# -----------------------------
# Router struct layouts
# -----------------------------

TOKEN_INFO_FIELDS: List[Dict[str, str]] = [
    {"name": "tokenAddress", "type": "address"},
    {"name": "tokenAmount", "type": "uint256"},
]

LIMIT_ORDER_TYPES: Dict[str, List[Dict[str, str]]] = {
    "TokenInfo": TOKEN_INFO_FIELDS,
    "LimitOrder": [
        {"name": "input", "type": "TokenInfo"},
        {"name": "output", "type": "TokenInfo"},
        {"name": "expiry", "type": "uint256"},
        {"name": "salt", "type": "uint256"},
        {"name": "referralCode", "type": "uint32"},
        {"name": "partiallyFillable", "type": "bool"},
    ],
}

MULTI_LIMIT_ORDER_TYPES: Dict[str, List[Dict[str, str]]] = {
    "TokenInfo": TOKEN_INFO_FIELDS,
    "MultiLimitOrder": [
        {"name": "inputs", "type": "TokenInfo[]"},
        {"name": "outputs", "type": "TokenInfo[]"},
        {"name": "expiry", "type": "uint256"},
        {"name": "salt", "type": "uint256"},
        {"name": "referralCode", "type": "uint32"},
        {"name": "partiallyFillable", "type": "bool"},
    ],
}

# Shared hashers; their type-hash caches only depend on the fixed layouts above.
LIMIT_ORDER_HASHER = TypedDataHasher(LIMIT_ORDER_TYPES)
MULTI_LIMIT_ORDER_HASHER = TypedDataHasher(MULTI_LIMIT_ORDER_TYPES)


# -----------------------------
# Order messages
# -----------------------------

@dataclass
class TokenInfo:
    """
    One side of an order: a token and an amount in its smallest unit.

    Attributes:
        tokenAddress: ERC-20 token contract address.
        tokenAmount:  Amount in the token's smallest unit (uint256). Decimal
                      strings are accepted, as the hasher parses them.
    """
    tokenAddress: str
    tokenAmount: Union[int, str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tokenAddress": self.tokenAddress,
            "tokenAmount": self.tokenAmount,
        }

    def to_abi_tuple(self) -> Tuple[str, int]:
        return (Web3.to_checksum_address(self.tokenAddress), int(self.tokenAmount))


@dataclass
class LimitOrder:
    """
    Single-token limit order as defined by ``OdosLimitOrderRouter.LimitOrder``.

    Attributes:
        input: Token and amount the maker sells.
        output: Token and minimum amount the maker receives.
        expiry: Unix timestamp after which the order cannot be filled.
        salt: Maker-chosen value making otherwise equal orders distinct.
        referralCode: Odos referral code (uint32).
        partiallyFillable: Whether the order may be filled in parts.
    """
    input: TokenInfo
    output: TokenInfo
    expiry: int
    salt: int
    referralCode: int = 0
    partiallyFillable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Message value for EIP-712 hashing, keyed by the struct's field names."""
        return {
            "input": self.input.to_dict(),
            "output": self.output.to_dict(),
            "expiry": self.expiry,
            "salt": self.salt,
            "referralCode": self.referralCode,
            "partiallyFillable": self.partiallyFillable,
        }

    def to_abi_tuple(self) -> Tuple[Any, ...]:
        """Tuple argument for the router's ``getLimitOrderHash`` view."""
        return (
            self.input.to_abi_tuple(),
            self.output.to_abi_tuple(),
            int(self.expiry),
            int(self.salt),
            int(self.referralCode),
            bool(self.partiallyFillable),
        )


@dataclass
class MultiLimitOrder:
    """
    Multi-token limit order as defined by ``OdosLimitOrderRouter.MultiLimitOrder``.

    Same as ``LimitOrder`` except that both sides are lists of ``TokenInfo``.
    """
    inputs: List[TokenInfo]
    outputs: List[TokenInfo]
    expiry: int
    salt: int
    referralCode: int = 0
    partiallyFillable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": [token.to_dict() for token in self.inputs],
            "outputs": [token.to_dict() for token in self.outputs],
            "expiry": self.expiry,
            "salt": self.salt,
            "referralCode": self.referralCode,
            "partiallyFillable": self.partiallyFillable,
        }

    def to_abi_tuple(self) -> Tuple[Any, ...]:
        return (
            [token.to_abi_tuple() for token in self.inputs],
            [token.to_abi_tuple() for token in self.outputs],
            int(self.expiry),
            int(self.salt),
            int(self.referralCode),
            bool(self.partiallyFillable),
        )


# -----------------------------
# EIP-712 Typed Data Wrappers
# -----------------------------

@dataclass
class LimitOrderTypedData:
    """
    Container for a ``LimitOrder`` usable with EIP-712 hashing and signing.

    ``to_dict()`` produces a dict compatible with most ``signTypedData``
    implementations: it includes ``types``, ``primaryType``, ``domain`` and
    ``message`` entries. ``hash()`` returns the digest the router computes
    in ``getLimitOrderHash``.

    Attributes:
        domain: Router domain (see ``build_router_domain``).
        message: The order.
        primary_type: Root struct name.
        types: Struct layouts, without ``EIP712Domain`` (derived from ``domain``).
    """
    domain: EIP712Domain
    message: LimitOrder

    primary_type: str = "LimitOrder"

    types: Dict[str, List[Dict[str, str]]] = field(
        default_factory=lambda: deepcopy(LIMIT_ORDER_TYPES)
    )

    @property
    def hasher(self) -> TypedDataHasher:
        if self.types == LIMIT_ORDER_TYPES:
            return LIMIT_ORDER_HASHER
        return TypedDataHasher(self.types)

    def hash(self) -> bytes:
        return self.hasher.hash(self.domain, self.message.to_dict(), self.primary_type)

    def to_dict(self) -> Dict[str, Any]:
        """Return a dictionary compatible with EIP-712 structured signing."""
        types = {
            EIP712_DOMAIN_TYPE: [
                {"name": f.name, "type": f.type.canonical} for f in self.domain.eip712_fields()
            ],
        }
        types.update(deepcopy(self.types))
        return {
            "types": types,
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.message.to_dict(),
        }


@dataclass
class MultiLimitOrderTypedData(LimitOrderTypedData):
    """
    Container for a ``MultiLimitOrder``; ``hash()`` matches the router's
    ``getMultiLimitOrderHash``.
    """
    message: MultiLimitOrder

    primary_type: str = "MultiLimitOrder"

    types: Dict[str, List[Dict[str, str]]] = field(
        default_factory=lambda: deepcopy(MULTI_LIMIT_ORDER_TYPES)
    )

    @property
    def hasher(self) -> TypedDataHasher:
        if self.types == MULTI_LIMIT_ORDER_TYPES:
            return MULTI_LIMIT_ORDER_HASHER
        return TypedDataHasher(self.types)


def build_typed_data(
    domain: EIP712Domain,
    order: Union[LimitOrder, MultiLimitOrder],
) -> LimitOrderTypedData:
    """Wrap ``order`` in the typed-data envelope matching its struct."""
    if isinstance(order, MultiLimitOrder):
        return MultiLimitOrderTypedData(domain=domain, message=order)
    return LimitOrderTypedData(domain=domain, message=order)
