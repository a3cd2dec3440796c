from odos_order_hash.orders import (
    LimitOrder,
    TokenInfo,
    LimitOrderTypedData,
    compare_with_router,
    fetch_router_domain,
    sign_limit_order,
)
from odos_order_hash.orders.constants import get_router_address, get_web3

wpk = "0xxxx"  # Replace with the maker's private key

order = LimitOrder(
    input=TokenInfo(tokenAddress="0xa0Cb889707d426A7A386870A03bc70d1b0697598", tokenAmount=2001 * 10**18),
    output=TokenInfo(tokenAddress="0xc7183455a4C133Ae270771860664b6B7ec320bB1", tokenAmount=2001 * 10**6),
    expiry=1 + 86400,
    salt=1,
)


async def main():
    w3 = get_web3()
    router = get_router_address()

    domain = await fetch_router_domain(w3, router)
    typed_data = LimitOrderTypedData(domain=domain, message=order)
    print("Local digest:", "0x" + typed_data.hash().hex())

    comparison = await compare_with_router(w3, router, order, domain=domain)
    print("Router digest:", comparison.onchain_hash, "match" if comparison.matches else "MISMATCH")

    signature = sign_limit_order(wpk, typed_data)
    return signature.to_packed_hex()


if __name__ == "__main__":
    import asyncio
    packed = asyncio.run(main())
    print("Signature:", packed)
