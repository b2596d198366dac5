"""Luno REST adapter and canonical market data model."""

from .protocol import (
    Account,
    Balances,
    Market,
    OrderBook,
    OrderResult,
    OrderSide,
    OrderType,
    Ticker,
    Trade,
)
from .normalization import CurrencyCanonicalizer, parse_decimal, parse_order_book, split_pair_id
from .signing import basic_auth_header, build_path
from .markets import MarketCache
from .endpoints import ENDPOINTS, Endpoint, resolve_endpoint
from .base import BaseExchangeClient, ProxyConfig, SignedRequest
from .luno import LunoClient

__all__ = [
    "Account",
    "Balances",
    "Market",
    "OrderBook",
    "OrderResult",
    "OrderSide",
    "OrderType",
    "Ticker",
    "Trade",
    "CurrencyCanonicalizer",
    "parse_decimal",
    "parse_order_book",
    "split_pair_id",
    "basic_auth_header",
    "build_path",
    "MarketCache",
    "ENDPOINTS",
    "Endpoint",
    "resolve_endpoint",
    "BaseExchangeClient",
    "ProxyConfig",
    "SignedRequest",
    "LunoClient",
]
