"""
OdosLimitOrderRouter Oracle Helpers

The deployed router exposes ``getLimitOrderHash`` and
``getMultiLimitOrderHash`` views that return the EIP-712 digest it will
verify signatures against. These helpers call those views through an
``AsyncWeb3`` instance and compare the result with the digest computed
locally by ``TypedDataHasher``.

The router is used only as a ground-truth comparison target; nothing in
the hashing path depends on a live connection.

Exported helpers
----------------
query_limit_order_hash / query_multi_limit_order_hash
    Raw ``eth_call`` of the router views.
fetch_router_domain
    Build the router's EIP-712 domain from the node's chain id.
compare_with_router
    Compute both digests and report whether they match.
"""

import asyncio
from typing import Any, Dict, List, Optional, Union

import aiohttp
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception

from .ROUTER_ABI import get_limit_order_hash_abi, get_multi_limit_order_hash_abi
from .schemas import OracleComparison
from .standards import LimitOrder, MultiLimitOrder, build_router_domain, build_typed_data
from ..engine.exceptions import ConfigurationError, OracleError
from ..engine.logging import get_logger
from ..schemas.domain import EIP712Domain

logger = get_logger(__name__)

# Contract-level failures from web3 plus transport failures from AsyncHTTPProvider.
RPC_ERRORS = (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError, OSError)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _checksum(w3: AsyncWeb3, address: str) -> str:
    try:
        return w3.to_checksum_address(address)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid router address: {address!r}") from exc


async def _call_hash_view(
    w3: AsyncWeb3,
    router: str,
    function_name: str,
    abi: List[Dict[str, Any]],
    order_tuple: Any,
) -> bytes:
    """
    Call a router hashing view and return its ``bytes32`` result.

    Raises:
        ConfigurationError: If ``router`` is not a valid address.
        OracleError: If the RPC call fails or returns something other than 32 bytes.
    """
    contract = w3.eth.contract(address=_checksum(w3, router), abi=abi)
    logger.debug("calling %s on %s", function_name, router)

    try:
        result = await getattr(contract.functions, function_name)(order_tuple).call()
    except RPC_ERRORS as exc:
        raise OracleError(
            f"Failed to call {function_name} on router {router}. Error: {exc!r}",
            function=function_name,
        ) from exc

    digest = bytes(result)
    if len(digest) != 32:
        raise OracleError(
            f"{function_name} returned {len(digest)} bytes, expected 32",
            function=function_name,
        )
    return digest


# ---------------------------------------------------------------------------
# Router views
# ---------------------------------------------------------------------------

async def query_limit_order_hash(w3: AsyncWeb3, router: str, order: LimitOrder) -> bytes:
    """
    Ask the router for the digest of a single-token ``LimitOrder``.

    Args:
        w3:     AsyncWeb3 instance connected to the router's chain.
        router: Router contract address.
        order:  The order to hash.

    Returns:
        The 32-byte digest returned by ``getLimitOrderHash``.
    """
    return await _call_hash_view(
        w3, router, "getLimitOrderHash", get_limit_order_hash_abi(), order.to_abi_tuple()
    )


async def query_multi_limit_order_hash(w3: AsyncWeb3, router: str, order: MultiLimitOrder) -> bytes:
    """Ask the router for the digest of a ``MultiLimitOrder``."""
    return await _call_hash_view(
        w3, router, "getMultiLimitOrderHash", get_multi_limit_order_hash_abi(), order.to_abi_tuple()
    )


async def fetch_router_domain(w3: AsyncWeb3, router: str) -> EIP712Domain:
    """
    Build the router's EIP-712 domain using the chain id reported by the node.

    Raises:
        OracleError: If the chain id cannot be read.
    """
    try:
        chain_id = await w3.eth.chain_id
    except RPC_ERRORS as exc:
        raise OracleError(f"Failed to read chain id. Error: {exc!r}", function="eth_chainId") from exc
    return build_router_domain(int(chain_id), _checksum(w3, router))


async def compare_with_router(
    w3: AsyncWeb3,
    router: str,
    order: Union[LimitOrder, MultiLimitOrder],
    domain: Optional[EIP712Domain] = None,
) -> OracleComparison:
    """
    Compute ``order``'s digest locally and on-chain and compare them.

    Args:
        w3:     AsyncWeb3 instance connected to the router's chain.
        router: Router contract address.
        order:  ``LimitOrder`` or ``MultiLimitOrder``.
        domain: Domain to hash with locally; fetched from the node when ``None``.

    Returns:
        ``OracleComparison`` with both digests. A mismatch is logged at
        warning level and reported through ``matches``; it is not raised.

    Raises:
        SchemaError: If the order does not fit the router's struct layout.
        OracleError: If the router call fails.
    """
    if domain is None:
        domain = await fetch_router_domain(w3, router)

    typed_data = build_typed_data(domain, order)
    local_hash = typed_data.hash()

    if isinstance(order, MultiLimitOrder):
        function_name = "getMultiLimitOrderHash"
        onchain_hash = await query_multi_limit_order_hash(w3, router, order)
    else:
        function_name = "getLimitOrderHash"
        onchain_hash = await query_limit_order_hash(w3, router, order)

    comparison = OracleComparison(
        function=function_name,
        local_hash="0x" + local_hash.hex(),
        onchain_hash="0x" + onchain_hash.hex(),
        matches=local_hash == onchain_hash,
    )
    if not comparison.matches:
        logger.warning(
            "%s mismatch: local %s, router %s",
            function_name, comparison.local_hash, comparison.onchain_hash,
        )
    return comparison
