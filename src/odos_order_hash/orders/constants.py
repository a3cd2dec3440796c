"""
Router Connection Configuration

Environment-aware access to the JSON-RPC endpoint and the router address
used by the oracle helpers. Values are read from the process environment,
after loading a ``.env`` file when one is present.

Environment variables:
    ODOS_RPC_URL:        JSON-RPC endpoint (default: local anvil node).
    ODOS_ROUTER_ADDRESS: Router contract address (default: first anvil deployment).
    ODOS_LOG_LEVEL:      Log level for ``odos_order_hash`` loggers.
"""

import os
from typing import Optional

import dotenv
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from ..engine.exceptions import ConfigurationError

dotenv.load_dotenv()

#: Local anvil node.
DEFAULT_RPC_URL = "http://127.0.0.1:8545"

#: Address of the first contract deployed by the default anvil account.
DEFAULT_ROUTER_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


def get_rpc_url() -> str:
    """
    Resolve the JSON-RPC URL.

    Returns:
        ``ODOS_RPC_URL`` when set, otherwise ``DEFAULT_RPC_URL``.

    Raises:
        ConfigurationError: If ``ODOS_RPC_URL`` is set but blank.
    """
    url = os.getenv("ODOS_RPC_URL", DEFAULT_RPC_URL)
    if not url.strip():
        raise ConfigurationError("ODOS_RPC_URL is set but empty")
    return url.strip()


def get_router_address() -> str:
    """
    Resolve the router address as a checksum address.

    Raises:
        ConfigurationError: If ``ODOS_ROUTER_ADDRESS`` is not a valid address.
    """
    address = os.getenv("ODOS_ROUTER_ADDRESS", DEFAULT_ROUTER_ADDRESS)
    try:
        return Web3.to_checksum_address(address)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid ODOS_ROUTER_ADDRESS: {address!r}") from exc


def get_web3(rpc_url: Optional[str] = None) -> AsyncWeb3:
    """Create an ``AsyncWeb3`` client for ``rpc_url`` (default: ``get_rpc_url()``)."""
    return AsyncWeb3(AsyncHTTPProvider(rpc_url or get_rpc_url()))
