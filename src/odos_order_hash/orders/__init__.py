from .standards import (
    ROUTER_DOMAIN_NAME,
    ROUTER_DOMAIN_VERSION,
    LIMIT_ORDER_TYPES,
    MULTI_LIMIT_ORDER_TYPES,
    TokenInfo,
    LimitOrder,
    MultiLimitOrder,
    LimitOrderTypedData,
    MultiLimitOrderTypedData,
    build_router_domain,
    build_typed_data,
)
from .schemas import OrderSignature, OracleComparison
from .signatures import sign_limit_order, recover_limit_order_signer
from .oracle import (
    query_limit_order_hash,
    query_multi_limit_order_hash,
    fetch_router_domain,
    compare_with_router,
)

__all__ = [
    "ROUTER_DOMAIN_NAME",
    "ROUTER_DOMAIN_VERSION",
    "LIMIT_ORDER_TYPES",
    "MULTI_LIMIT_ORDER_TYPES",
    "TokenInfo",
    "LimitOrder",
    "MultiLimitOrder",
    "LimitOrderTypedData",
    "MultiLimitOrderTypedData",
    "build_router_domain",
    "build_typed_data",
    "OrderSignature",
    "OracleComparison",
    "sign_limit_order",
    "recover_limit_order_signer",
    "query_limit_order_hash",
    "query_multi_limit_order_hash",
    "fetch_router_domain",
    "compare_with_router",
]
