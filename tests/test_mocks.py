"""
Typed-Data Test Mocks Module

Shared constants, order factories and a mock ``AsyncWeb3`` provider for
testing the hasher and the router oracle helpers without a blockchain node.

Key Components:
    - Router fixtures: the limit orders the router hashing views are checked with
    - EIP-712 ``Mail`` example with the published intermediate hashes
    - ``reference_digest``: digest computed by eth_account's independent encoder
    - MockWeb3Provider / MockRouterContract: simulated RPC responses

Usage:
    from test_mocks import (
        create_limit_order,
        create_router_domain,
        MockWeb3Provider,
    )
"""

from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, Mock

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import keccak
from web3 import AsyncWeb3

from odos_order_hash.orders.standards import (
    LimitOrder,
    MultiLimitOrder,
    TokenInfo,
    build_router_domain,
)
from odos_order_hash.schemas.domain import EIP712Domain


# ========================================================================
# Router Constants
# ========================================================================

# Default anvil address for the first deployment
MOCK_ROUTER_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
MOCK_CHAIN_ID_ANVIL = 31337

MOCK_TOKEN_A = "0xa0Cb889707d426A7A386870A03bc70d1b0697598"
MOCK_TOKEN_B = "0xc7183455a4C133Ae270771860664b6B7ec320bB1"
MOCK_TOKEN_C = "0x1d1499e622D69689cdf9004d05Ec547d650Ff211"
MOCK_TOKEN_D = "0xA4AD4f68d0b91CFD19687c881e50f3A00242828c"

MOCK_EXPIRY = 1 + 86400
MOCK_SALT = 1

# Test private key (do not use in production!)
MOCK_MAKER_PRIVATE_KEY = "0x1234567890123456789012345678901234567890123456789012345678901234"
MOCK_MAKER_ADDRESS = Account.from_key(MOCK_MAKER_PRIVATE_KEY).address

#: keccak256 of zero bytes
KECCAK_EMPTY = bytes.fromhex("c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470")


# ========================================================================
# EIP-712 "Mail" example (published test vectors)
# ========================================================================

MAIL_TYPES = {
    "Person": [
        {"name": "name", "type": "string"},
        {"name": "wallet", "type": "address"},
    ],
    "Mail": [
        {"name": "from", "type": "Person"},
        {"name": "to", "type": "Person"},
        {"name": "contents", "type": "string"},
    ],
}

MAIL_DOMAIN = {
    "name": "Ether Mail",
    "version": "1",
    "chainId": 1,
    "verifyingContract": "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC",
}

MAIL_MESSAGE = {
    "from": {"name": "Cow", "wallet": "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"},
    "to": {"name": "Bob", "wallet": "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"},
    "contents": "Hello, Bob!",
}

MAIL_ENCODED_TYPE = "Mail(Person from,Person to,string contents)Person(string name,address wallet)"
MAIL_TYPE_HASH = "0xa0cedeb2dc280ba39b857546d74f5549c3a1d7bdc2dd96bf881f76108e23dac2"
MAIL_STRUCT_HASH = "0xc52c0ee5d84264471806290a3f2c4cecfc5490626bf912d01f240d7a274b371e"
MAIL_DOMAIN_SEPARATOR = "0xf2cee375fa42b42143804025fc449deafd50cc031ca257e0b194a650a912090f"
MAIL_DIGEST = "0xbe609aee343fb3c4b28e1df9e632fca64fcfaede20f02e86244efddf30957bd2"

EIP712_DOMAIN_TYPE_HASH = "0x8b73c3c69bb8fe3d512ecc4cf759cc79239f7b179b0ffacaa9a75d522b39400f"


# ========================================================================
# Order Factories
# ========================================================================

def create_router_domain(
    chain_id: int = MOCK_CHAIN_ID_ANVIL,
    router: str = MOCK_ROUTER_ADDRESS,
) -> EIP712Domain:
    """Router domain for the anvil deployment used throughout the suite."""
    return build_router_domain(chain_id, router)


def create_limit_order(**overrides: Any) -> LimitOrder:
    """
    Single limit order fixture: sell 2001 of token A (18 decimals) for at
    least 2001 of token B (6 decimals).
    """
    fields = dict(
        input=TokenInfo(tokenAddress=MOCK_TOKEN_A, tokenAmount=2001000000000000000000),
        output=TokenInfo(tokenAddress=MOCK_TOKEN_B, tokenAmount=2001000000),
        expiry=MOCK_EXPIRY,
        salt=MOCK_SALT,
        referralCode=0,
        partiallyFillable=False,
    )
    fields.update(overrides)
    return LimitOrder(**fields)


def create_multi_limit_order(**overrides: Any) -> MultiLimitOrder:
    """Multi limit order fixture with two tokens on each side."""
    fields = dict(
        inputs=[
            TokenInfo(tokenAddress=MOCK_TOKEN_A, tokenAmount=1999000000000000000000),
            TokenInfo(tokenAddress=MOCK_TOKEN_C, tokenAmount=2001000000000000000000),
        ],
        outputs=[
            TokenInfo(tokenAddress=MOCK_TOKEN_B, tokenAmount=2002000000),
            TokenInfo(tokenAddress=MOCK_TOKEN_D, tokenAmount=1998000000000000000000),
        ],
        expiry=MOCK_EXPIRY,
        salt=MOCK_SALT,
        referralCode=0,
        partiallyFillable=False,
    )
    fields.update(overrides)
    return MultiLimitOrder(**fields)


def reference_digest(full_message: Dict[str, Any]) -> bytes:
    """
    EIP-712 digest computed by eth_account's own encoder.

    Used as an independent implementation to check ``TypedDataHasher``.
    """
    signable = encode_typed_data(full_message=full_message)
    return keccak(b"\x19" + signable.version + signable.header + signable.body)


# ========================================================================
# Mock Router Contract and Web3 Provider
# ========================================================================

class MockRouterContract:
    """
    Mock router contract exposing the two hashing views.

    Attributes:
        limit_order_hash: Bytes returned by ``getLimitOrderHash().call()``.
        multi_limit_order_hash: Bytes returned by ``getMultiLimitOrderHash().call()``.
        error: Exception raised by both calls when set.
    """

    def __init__(
        self,
        limit_order_hash: bytes = b"\x00" * 32,
        multi_limit_order_hash: bytes = b"\x00" * 32,
        error: Optional[Exception] = None,
    ):
        self.functions = Mock()

        limit_call = Mock()
        limit_call.call = AsyncMock(return_value=limit_order_hash, side_effect=error)
        self.functions.getLimitOrderHash = Mock(return_value=limit_call)

        multi_call = Mock()
        multi_call.call = AsyncMock(return_value=multi_limit_order_hash, side_effect=error)
        self.functions.getMultiLimitOrderHash = Mock(return_value=multi_call)


class MockEth:
    """
    Mock ``w3.eth`` namespace: ``chain_id`` awaitable and ``contract`` factory.

    ``chain_id_error``, when set, is raised by awaiting ``chain_id``.
    """

    def __init__(
        self,
        chain_id: int,
        contract: MockRouterContract,
        chain_id_error: Optional[Exception] = None,
    ):
        self._chain_id = chain_id
        self._chain_id_error = chain_id_error
        self.contract = Mock(return_value=contract)

    @property
    def chain_id(self):
        async def _chain_id():
            if self._chain_id_error is not None:
                raise self._chain_id_error
            return self._chain_id
        return _chain_id()


class MockWeb3Provider:
    """
    Mock AsyncWeb3 provider for the router oracle helpers.

    Attributes:
        eth: ``MockEth`` namespace.
        router: The ``MockRouterContract`` returned by ``eth.contract``.
    """

    def __init__(
        self,
        chain_id: int = MOCK_CHAIN_ID_ANVIL,
        router: Optional[MockRouterContract] = None,
        chain_id_error: Optional[Exception] = None,
    ):
        self.router = router or MockRouterContract()
        self.eth = MockEth(chain_id, self.router, chain_id_error)

    @staticmethod
    def to_checksum_address(address: str) -> str:
        return AsyncWeb3.to_checksum_address(address)
