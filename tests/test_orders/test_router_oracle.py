"""
Router Oracle Tests

Exercises the router hashing-view helpers against a mocked AsyncWeb3
provider: digest comparison, domain discovery and error mapping.

Usage:
    pytest tests/test_orders/test_router_oracle.py -v
"""

import asyncio
import logging

import aiohttp
import pytest
from web3.exceptions import Web3Exception

from odos_order_hash import ConfigurationError, OracleError
from odos_order_hash.orders import (
    LimitOrderTypedData,
    MultiLimitOrderTypedData,
    compare_with_router,
    fetch_router_domain,
    query_limit_order_hash,
    query_multi_limit_order_hash,
)

from test_mocks import (
    MOCK_CHAIN_ID_ANVIL,
    MOCK_ROUTER_ADDRESS,
    MockRouterContract,
    MockWeb3Provider,
    create_limit_order,
    create_multi_limit_order,
    create_router_domain,
)


def _limit_digest(order=None, chain_id=MOCK_CHAIN_ID_ANVIL):
    return LimitOrderTypedData(
        domain=create_router_domain(chain_id=chain_id), message=order or create_limit_order()
    ).hash()


def _multi_digest(order=None):
    return MultiLimitOrderTypedData(
        domain=create_router_domain(), message=order or create_multi_limit_order()
    ).hash()


class TestQueryViews:

    @pytest.mark.asyncio
    async def test_query_limit_order_hash(self):
        order = create_limit_order()
        w3 = MockWeb3Provider(router=MockRouterContract(limit_order_hash=b"\xab" * 32))

        digest = await query_limit_order_hash(w3, MOCK_ROUTER_ADDRESS, order)

        assert digest == b"\xab" * 32
        w3.router.functions.getLimitOrderHash.assert_called_once_with(order.to_abi_tuple())
        _, kwargs = w3.eth.contract.call_args
        assert kwargs["address"] == MOCK_ROUTER_ADDRESS
        assert kwargs["abi"][0]["name"] == "getLimitOrderHash"

    @pytest.mark.asyncio
    async def test_query_multi_limit_order_hash(self):
        order = create_multi_limit_order()
        w3 = MockWeb3Provider(router=MockRouterContract(multi_limit_order_hash=b"\xcd" * 32))

        digest = await query_multi_limit_order_hash(w3, MOCK_ROUTER_ADDRESS, order)

        assert digest == b"\xcd" * 32
        w3.router.functions.getMultiLimitOrderHash.assert_called_once_with(order.to_abi_tuple())

    @pytest.mark.asyncio
    async def test_router_address_is_checksummed(self):
        w3 = MockWeb3Provider()
        await query_limit_order_hash(w3, MOCK_ROUTER_ADDRESS.lower(), create_limit_order())
        _, kwargs = w3.eth.contract.call_args
        assert kwargs["address"] == MOCK_ROUTER_ADDRESS

    @pytest.mark.asyncio
    async def test_rpc_failure_raises_oracle_error(self):
        w3 = MockWeb3Provider(router=MockRouterContract(error=Web3Exception("execution reverted")))

        with pytest.raises(OracleError, match="getLimitOrderHash") as exc_info:
            await query_limit_order_hash(w3, MOCK_ROUTER_ADDRESS, create_limit_order())
        assert exc_info.value.function == "getLimitOrderHash"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            aiohttp.ClientConnectionError("Cannot connect to host 127.0.0.1:8545"),
            asyncio.TimeoutError(),
            ConnectionRefusedError(111, "Connection refused"),
        ],
    )
    async def test_transport_failure_raises_oracle_error(self, error):
        w3 = MockWeb3Provider(router=MockRouterContract(error=error))

        with pytest.raises(OracleError) as exc_info:
            await query_multi_limit_order_hash(w3, MOCK_ROUTER_ADDRESS, create_multi_limit_order())
        assert exc_info.value.function == "getMultiLimitOrderHash"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_wrong_length_result_raises_oracle_error(self):
        w3 = MockWeb3Provider(router=MockRouterContract(multi_limit_order_hash=b"\x01" * 20))

        with pytest.raises(OracleError, match="expected 32"):
            await query_multi_limit_order_hash(w3, MOCK_ROUTER_ADDRESS, create_multi_limit_order())

    @pytest.mark.asyncio
    async def test_invalid_router_address(self):
        w3 = MockWeb3Provider()
        with pytest.raises(ConfigurationError, match="Invalid router address"):
            await query_limit_order_hash(w3, "0x1234", create_limit_order())


class TestFetchRouterDomain:

    @pytest.mark.asyncio
    async def test_domain_uses_node_chain_id(self):
        w3 = MockWeb3Provider(chain_id=8453)
        domain = await fetch_router_domain(w3, MOCK_ROUTER_ADDRESS.lower())
        assert domain == create_router_domain(chain_id=8453)

    @pytest.mark.asyncio
    async def test_chain_id_failure_raises_oracle_error(self):
        w3 = MockWeb3Provider(chain_id_error=aiohttp.ClientConnectionError("Cannot connect to host"))

        with pytest.raises(OracleError, match="chain id"):
            await fetch_router_domain(w3, MOCK_ROUTER_ADDRESS)

    @pytest.mark.asyncio
    async def test_chain_id_timeout_propagates_through_compare(self):
        w3 = MockWeb3Provider(chain_id_error=asyncio.TimeoutError())

        with pytest.raises(OracleError):
            await compare_with_router(w3, MOCK_ROUTER_ADDRESS, create_limit_order())
        w3.router.functions.getLimitOrderHash.assert_not_called()


class TestCompareWithRouter:

    @pytest.mark.asyncio
    async def test_limit_order_match(self):
        order = create_limit_order()
        expected = _limit_digest(order)
        w3 = MockWeb3Provider(router=MockRouterContract(limit_order_hash=expected))

        result = await compare_with_router(w3, MOCK_ROUTER_ADDRESS, order)

        assert result.matches is True
        assert result.function == "getLimitOrderHash"
        assert result.local_hash == result.onchain_hash == "0x" + expected.hex()

    @pytest.mark.asyncio
    async def test_multi_limit_order_match(self):
        order = create_multi_limit_order()
        expected = _multi_digest(order)
        w3 = MockWeb3Provider(router=MockRouterContract(multi_limit_order_hash=expected))

        result = await compare_with_router(w3, MOCK_ROUTER_ADDRESS, order)

        assert result.matches is True
        assert result.function == "getMultiLimitOrderHash"
        w3.router.functions.getLimitOrderHash.assert_not_called()

    @pytest.mark.asyncio
    async def test_explicit_domain_skips_chain_id(self):
        order = create_limit_order()
        expected = _limit_digest(order, chain_id=1)
        w3 = MockWeb3Provider(chain_id=MOCK_CHAIN_ID_ANVIL, router=MockRouterContract(limit_order_hash=expected))

        result = await compare_with_router(
            w3, MOCK_ROUTER_ADDRESS, order, domain=create_router_domain(chain_id=1)
        )

        assert result.matches is True

    @pytest.mark.asyncio
    async def test_mismatch_is_reported_and_logged(self, caplog):
        order = create_limit_order()
        w3 = MockWeb3Provider(chain_id=1, router=MockRouterContract(limit_order_hash=_limit_digest(order)))

        with caplog.at_level(logging.WARNING):
            result = await compare_with_router(w3, MOCK_ROUTER_ADDRESS, order)

        assert result.matches is False
        assert result.local_hash != result.onchain_hash
        assert "getLimitOrderHash mismatch" in caplog.text

    @pytest.mark.asyncio
    async def test_oracle_error_propagates(self):
        w3 = MockWeb3Provider(router=MockRouterContract(error=Web3Exception("connection refused")))
        with pytest.raises(OracleError):
            await compare_with_router(w3, MOCK_ROUTER_ADDRESS, create_multi_limit_order())
