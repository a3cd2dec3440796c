"""
Order Signing Utilities

Local signing and signer recovery for limit orders. Signing goes over the
digest computed by ``TypedDataHasher``; recovery rebuilds the digest with
``eth_account``'s own EIP-712 encoder, so a signature that round-trips
also confirms the two encoders agree. No RPC calls are made.
"""

from eth_account import Account
from eth_account.messages import encode_typed_data

from .schemas import OrderSignature
from .standards import LimitOrderTypedData


def sign_limit_order(private_key: str, typed_data: LimitOrderTypedData) -> OrderSignature:
    """
    Sign an order digest with a secp256k1 private key.

    Args:
        private_key: Hex-encoded private key of the maker (with or without ``0x``).
        typed_data:  ``LimitOrderTypedData`` or ``MultiLimitOrderTypedData``.

    Returns:
        ``OrderSignature`` with v, r, s populated.

    Raises:
        SchemaError: If the order does not conform to its struct layout.

    Example::

        typed_data = LimitOrderTypedData(domain=build_router_domain(1, router), message=order)
        sig = sign_limit_order("0xYOUR_PRIVATE_KEY", typed_data)
        packed = sig.to_packed_hex()
    """
    digest = typed_data.hash()
    signed = Account.unsafe_sign_hash(digest, private_key)
    return OrderSignature(
        v=signed.v,
        r="0x" + signed.r.to_bytes(32, "big").hex(),
        s="0x" + signed.s.to_bytes(32, "big").hex(),
    )


def recover_limit_order_signer(typed_data: LimitOrderTypedData, signature: OrderSignature) -> str:
    """
    Recover the checksum address that produced ``signature`` over ``typed_data``.

    Raises:
        ValueError: If the signature components are malformed.
    """
    signable = encode_typed_data(full_message=typed_data.to_dict())
    return Account.recover_message(signable, vrs=signature.to_vrs())
