"""Luno exchange adapter."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping

from ..errors import ExchangeError, InputFormatError, classify_exchange_error
from . import endpoints
from .base import BaseExchangeClient, ProxyConfig, SignedRequest
from .endpoints import Endpoint, resolve_endpoint
from .markets import MarketCache
from .normalization import (
    CurrencyCanonicalizer,
    make_symbol,
    parse_bool,
    parse_decimal,
    parse_order_book,
    parse_timestamp,
    require,
    split_pair_id,
)
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
from .signing import basic_auth_header, build_path

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.mybitx.com/api"
DEFAULT_VERSION = "1"


def _coerce_enum(enum_cls: type, value: Any, label: str) -> Any:
    try:
        return enum_cls(value.lower() if isinstance(value, str) else value)
    except ValueError:
        raise ValueError(f"Unsupported {label}: {value!r}") from None


class LunoClient(BaseExchangeClient):
    """Luno exchange client."""

    def __init__(
        self,
        api_key: str = "",
        api_secret: str = "",
        *,
        base_url: str = DEFAULT_BASE_URL,
        version: str = DEFAULT_VERSION,
        markets: MarketCache | None = None,
        currencies: CurrencyCanonicalizer | None = None,
        proxy: ProxyConfig | None = None,
        timeout: float = 30.0,
        **options: Any,
    ):
        super().__init__(
            "luno",
            api_key,
            api_secret,
            base_url=base_url,
            version=version,
            markets=markets,
            proxy=proxy,
            timeout=timeout,
            **options,
        )
        self.currencies = currencies or CurrencyCanonicalizer()

    # Request construction

    def sign(
        self,
        path: str,
        api: str = "public",
        method: str = "GET",
        params: dict[str, Any] | None = None,
    ) -> SignedRequest:
        resolved, _ = build_path(path, params)
        headers = self._get_headers()
        if api == "private":
            headers["Authorization"] = basic_auth_header(self.api_key, self.api_secret)
        return SignedRequest(url=f"{self.get_base_url()}/{resolved}", method=method, headers=headers)

    def check_response(self, response: Any) -> Any:
        """Raise ExchangeError if the decoded response carries an error indicator."""
        if self.is_error_response(response):
            raise ExchangeError(f"{self.name} {json.dumps(response)}", response=response)
        return response

    async def call(self, endpoint: Endpoint, params: Mapping[str, Any] | None = None) -> Any:
        """Send one request to a table endpoint and return the validated response."""
        request = self.sign(endpoint.path, endpoint.api, endpoint.method, dict(params or {}))
        response = await self.fetch(request)
        try:
            return self.check_response(response)
        except ExchangeError as exc:
            refined = classify_exchange_error(exc)
            if refined is exc:
                raise
            raise refined from exc

    async def request(self, method: str, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Call any endpoint of the Luno API by verb and path template.

        Example:
            await client.request("GET", "orders/{id}", {"id": "BXMC2CJ7HNB88U4"})
        """
        return await self.call(resolve_endpoint(method, path), params)

    # Normalizers

    def parse_market(self, raw: Mapping[str, Any]) -> Market:
        market_id = require(raw, "pair")
        base, quote = split_pair_id(market_id)
        base = self.currencies.normalize(base)
        quote = self.currencies.normalize(quote)
        return Market(
            id=market_id,
            symbol=make_symbol(base, quote),
            base=base,
            quote=quote,
            info=raw,
        )

    def parse_markets(self, raw_tickers: Iterable[Mapping[str, Any]]) -> list[Market]:
        return [self.parse_market(raw) for raw in raw_tickers]

    def parse_balance(self, response: Mapping[str, Any]) -> Balances:
        """Build per-currency accounts from a balance response.

        ``used`` is reserved plus unconfirmed funds and ``total`` is free plus used.
        A currency listed twice keeps its last entry.
        """
        entries = require(response, "balance")
        if not isinstance(entries, list):
            raise InputFormatError("Field 'balance' must be a list", field="balance", payload=entries)

        accounts: dict[str, Account] = {}
        for entry in entries:
            currency = self.currencies.normalize(require(entry, "asset"))
            accounts[currency] = Account.from_components(
                free=parse_decimal(require(entry, "balance"), "balance"),
                reserved=parse_decimal(require(entry, "reserved"), "reserved"),
                unconfirmed=parse_decimal(require(entry, "unconfirmed"), "unconfirmed"),
            )
        return Balances(accounts=accounts, info=response)

    def parse_ticker(self, raw: Mapping[str, Any], market: Market | None = None) -> Ticker:
        return Ticker(
            symbol=market.symbol if market else None,
            timestamp=parse_timestamp(require(raw, "timestamp")),
            bid=parse_decimal(require(raw, "bid"), "bid"),
            ask=parse_decimal(require(raw, "ask"), "ask"),
            last=parse_decimal(require(raw, "last_trade"), "last_trade"),
            quote_volume=parse_decimal(require(raw, "rolling_24_hour_volume"), "rolling_24_hour_volume"),
            info=raw,
        )

    def parse_trade(self, raw: Mapping[str, Any], market: Market) -> Trade:
        side = OrderSide.BUY if parse_bool(require(raw, "is_buy"), "is_buy") else OrderSide.SELL
        return Trade(
            timestamp=parse_timestamp(require(raw, "timestamp")),
            symbol=market.symbol,
            side=side.value,
            price=parse_decimal(require(raw, "price"), "price"),
            amount=parse_decimal(require(raw, "volume"), "volume"),
            info=raw,
        )

    def parse_trades(self, raw_trades: Iterable[Mapping[str, Any]], market: Market) -> list[Trade]:
        return [self.parse_trade(raw, market) for raw in raw_trades]

    @staticmethod
    def build_order_request(
        market_id: str,
        order_type: OrderType | str,
        side: OrderSide | str,
        amount: Decimal | float | str,
        price: Decimal | float | str | None = None,
    ) -> dict[str, Any]:
        """Translate an order intent into Luno's payload.

        Market buys are sized in the quote currency (``counter_volume``) and market
        sells in the base currency (``base_volume``); price is ignored. Limit orders
        are sized in the base currency under ``volume`` and carry BID or ASK.

        Raises:
            ValueError: If the type or side is unknown, or a limit order has no price
        """
        order_type = _coerce_enum(OrderType, order_type, "order type")
        side = _coerce_enum(OrderSide, side, "order side")
        if amount is None:
            raise ValueError("Order amount is required")

        order: dict[str, Any] = {"pair": market_id}
        if order_type is OrderType.MARKET:
            order["type"] = side.value.upper()
            if side is OrderSide.BUY:
                order["counter_volume"] = amount
            else:
                order["base_volume"] = amount
        else:
            if price is None:
                raise ValueError("Limit orders require a price")
            order["volume"] = amount
            order["price"] = price
            order["type"] = "BID" if side is OrderSide.BUY else "ASK"
        return order

    # Public operations

    async def list_markets(self) -> list[Market]:
        """Fetch the tradable markets from the tickers endpoint."""
        response = await self.call(endpoints.TICKERS)
        tickers = require(response, "tickers")
        return self.parse_markets(tickers)

    async def get_balance(self) -> Balances:
        await self.load_markets()
        response = await self.call(endpoints.BALANCE)
        return self.parse_balance(response)

    async def get_order_book(self, symbol: str, params: Mapping[str, Any] | None = None) -> OrderBook:
        await self.load_markets()
        request = {"pair": self.market_id(symbol), **(params or {})}
        response = await self.call(endpoints.ORDERBOOK, request)
        return parse_order_book(response, require(response, "timestamp"), "bids", "asks", "price", "volume")

    async def get_ticker(self, symbol: str, params: Mapping[str, Any] | None = None) -> Ticker:
        await self.load_markets()
        market = self.market(symbol)
        response = await self.call(endpoints.TICKER, {"pair": market.id, **(params or {})})
        return self.parse_ticker(response, market)

    async def get_tickers(
        self, symbols: Iterable[str] | None = None, params: Mapping[str, Any] | None = None
    ) -> dict[str, Ticker]:
        """Fetch every ticker, keyed by canonical symbol."""
        await self.load_markets()
        response = await self.call(endpoints.TICKERS, params)
        by_id = {require(raw, "pair"): raw for raw in require(response, "tickers")}

        wanted = set(symbols) if symbols is not None else None
        result: dict[str, Ticker] = {}
        for market_id, raw in by_id.items():
            market = self.markets.by_id(market_id)
            if wanted is not None and market.symbol not in wanted:
                continue
            result[market.symbol] = self.parse_ticker(raw, market)
        return result

    async def get_trades(
        self, symbol: str, since: int | None = None, params: Mapping[str, Any] | None = None
    ) -> list[Trade]:
        """Fetch recent trades; ``params`` are merged over the pair and ``since``."""
        await self.load_markets()
        market = self.market(symbol)
        request: dict[str, Any] = {"pair": market.id}
        if since is not None:
            request["since"] = since
        request.update(params or {})
        response = await self.call(endpoints.TRADES, request)
        return self.parse_trades(require(response, "trades"), market)

    async def place_order(
        self,
        symbol: str,
        order_type: OrderType | str,
        side: OrderSide | str,
        amount: Decimal | float | str,
        price: Decimal | float | str | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> OrderResult:
        """Place a market or limit order.

        Args:
            symbol: Canonical symbol (e.g., 'BTC/ZAR')
            order_type: 'market' or 'limit'
            side: 'buy' or 'sell'
            amount: Quote amount for market buys, base amount otherwise
            price: Limit price, required for limit orders
            params: Extra Luno fields merged into the payload

        Returns:
            OrderResult with the exchange-assigned order id
        """
        await self.load_markets()
        order_type = _coerce_enum(OrderType, order_type, "order type")
        side = _coerce_enum(OrderSide, side, "order side")
        order = self.build_order_request(self.market_id(symbol), order_type, side, amount, price)
        order.update(params or {})

        endpoint = endpoints.MARKET_ORDER if order_type is OrderType.MARKET else endpoints.POST_ORDER
        logger.info(
            "Placing %s %s order on %s %s: amount=%s price=%s",
            order_type.value,
            side.value,
            self.name,
            symbol,
            amount,
            price,
        )
        response = await self.call(endpoint, order)
        return OrderResult(id=str(require(response, "order_id")), info=response)

    async def cancel_order(self, order_id: str) -> Any:
        await self.load_markets()
        logger.info("Cancelling order %s on %s", order_id, self.name)
        return await self.call(endpoints.STOP_ORDER, {"order_id": order_id})
