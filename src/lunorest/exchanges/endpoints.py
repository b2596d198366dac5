"""Luno REST endpoint table."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Endpoint:
    api: str
    method: str
    path: str

    @property
    def private(self) -> bool:
        return self.api == "private"


_TABLE: dict[str, dict[str, tuple[str, ...]]] = {
    "public": {
        "GET": (
            "orderbook",
            "ticker",
            "tickers",
            "trades",
        ),
    },
    "private": {
        "GET": (
            "accounts/{id}/pending",
            "accounts/{id}/transactions",
            "balance",
            "fee_info",
            "funding_address",
            "listorders",
            "listtrades",
            "orders/{id}",
            "quotes/{id}",
            "withdrawals",
            "withdrawals/{id}",
        ),
        "POST": (
            "accounts",
            "postorder",
            "marketorder",
            "stoporder",
            "funding_address",
            "withdrawals",
            "send",
            "quotes",
            "oauth2/grant",
        ),
        "PUT": (
            "quotes/{id}",
        ),
        "DELETE": (
            "quotes/{id}",
            "withdrawals/{id}",
        ),
    },
}

ENDPOINTS: dict[tuple[str, str], Endpoint] = {
    (method, path): Endpoint(api, method, path)
    for api, methods in _TABLE.items()
    for method, paths in methods.items()
    for path in paths
}


def resolve_endpoint(method: str, path: str) -> Endpoint:
    """Look up an endpoint by HTTP verb and path template.

    Raises:
        ValueError: If the endpoint is not part of the API
    """
    try:
        return ENDPOINTS[(method.upper(), path)]
    except KeyError:
        raise ValueError(f"Unknown Luno endpoint: {method.upper()} {path}") from None


ORDERBOOK = resolve_endpoint("GET", "orderbook")
TICKER = resolve_endpoint("GET", "ticker")
TICKERS = resolve_endpoint("GET", "tickers")
TRADES = resolve_endpoint("GET", "trades")
BALANCE = resolve_endpoint("GET", "balance")
POST_ORDER = resolve_endpoint("POST", "postorder")
MARKET_ORDER = resolve_endpoint("POST", "marketorder")
STOP_ORDER = resolve_endpoint("POST", "stoporder")
