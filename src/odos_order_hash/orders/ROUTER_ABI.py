"""
OdosLimitOrderRouter Hash View ABI Module

ABI fragments for the router's two hashing views. Both take the order
struct as a single tuple argument and return the EIP-712 digest the router
expects orders to be signed over.

Usage:
    from ROUTER_ABI import get_router_abi

    contract = web3.eth.contract(address=router_address, abi=get_router_abi())
    digest = await contract.functions.getLimitOrderHash(order.to_abi_tuple()).call()
"""

from typing import Any, Dict, List


def _token_info_tuple(name: str, array: bool = False) -> Dict[str, Any]:
    suffix = "[]" if array else ""
    return {
        "name": name,
        "type": f"tuple{suffix}",
        "internalType": f"struct OdosLimitOrderRouter.TokenInfo{suffix}",
        "components": [
            {"name": "tokenAddress", "type": "address", "internalType": "address"},
            {"name": "tokenAmount", "type": "uint256", "internalType": "uint256"},
        ],
    }


def _order_tail() -> List[Dict[str, Any]]:
    return [
        {"name": "expiry", "type": "uint256", "internalType": "uint256"},
        {"name": "salt", "type": "uint256", "internalType": "uint256"},
        {"name": "referralCode", "type": "uint32", "internalType": "uint32"},
        {"name": "partiallyFillable", "type": "bool", "internalType": "bool"},
    ]


def get_limit_order_hash_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ``getLimitOrderHash(LimitOrder order) returns (bytes32 hash)``.

    Returns:
        List[Dict[str, Any]]: ABI for the ``getLimitOrderHash`` view.
    """
    return [
        {
            "type": "function",
            "name": "getLimitOrderHash",
            "inputs": [
                {
                    "name": "order",
                    "type": "tuple",
                    "internalType": "struct OdosLimitOrderRouter.LimitOrder",
                    "components": [
                        _token_info_tuple("input"),
                        _token_info_tuple("output"),
                        *_order_tail(),
                    ],
                }
            ],
            "outputs": [{"name": "hash", "type": "bytes32", "internalType": "bytes32"}],
            "stateMutability": "view",
        }
    ]


def get_multi_limit_order_hash_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ``getMultiLimitOrderHash(MultiLimitOrder order) returns (bytes32 hash)``.

    Returns:
        List[Dict[str, Any]]: ABI for the ``getMultiLimitOrderHash`` view.
    """
    return [
        {
            "type": "function",
            "name": "getMultiLimitOrderHash",
            "inputs": [
                {
                    "name": "order",
                    "type": "tuple",
                    "internalType": "struct OdosLimitOrderRouter.MultiLimitOrder",
                    "components": [
                        _token_info_tuple("inputs", array=True),
                        _token_info_tuple("outputs", array=True),
                        *_order_tail(),
                    ],
                }
            ],
            "outputs": [{"name": "hash", "type": "bytes32", "internalType": "bytes32"}],
            "stateMutability": "view",
        }
    ]


def get_router_abi() -> List[Dict[str, Any]]:
    """Both hashing views in one ABI list."""
    return get_limit_order_hash_abi() + get_multi_limit_order_hash_abi()
