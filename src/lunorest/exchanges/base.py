"""Base client class for exchange adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping

import aiohttp

from ..errors import TransportError
from .markets import MarketCache
from .protocol import Balances, Market, OrderBook, OrderResult, Ticker, Trade

logger = logging.getLogger(__name__)


class ProxyConfig:
    """HTTP proxy configuration."""

    def __init__(self, url: str | None = None, username: str | None = None, password: str | None = None):
        self.url = url
        self.username = username
        self.password = password

    @property
    def proxy_url(self) -> str | None:
        if not self.url:
            return None
        if self.username and self.password:
            protocol = self.url.split("://")[0] if "://" in self.url else "http"
            rest = self.url.split("://")[1] if "://" in self.url else self.url
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        return self.url


@dataclass(slots=True)
class SignedRequest:
    """A transport-ready request."""

    url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


class BaseExchangeClient(ABC):
    """Base class for exchange adapters."""

    user_agent = "lunorest/0.1"

    def __init__(
        self,
        name: str,
        api_key: str,
        api_secret: str,
        *,
        base_url: str,
        version: str,
        markets: MarketCache | None = None,
        proxy: ProxyConfig | None = None,
        timeout: float = 30.0,
        **options: Any,
    ):
        """Initialize exchange client.

        Args:
            name: Exchange name
            api_key: API key
            api_secret: API secret
            base_url: API root without the version segment
            version: API version segment
            markets: Market cache, shared between clients if desired
            proxy: Proxy configuration
            timeout: Total request timeout in seconds
            **options: Additional exchange-specific options
        """
        self.name = name
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.version = version
        self.markets = markets if markets is not None else MarketCache()
        self.proxy = proxy or ProxyConfig()
        self.timeout = timeout
        self.options = options
        self.session: aiohttp.ClientSession | None = None

    def get_base_url(self) -> str:
        return f"{self.base_url}/{self.version}"

    def _get_headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent}

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            connector = aiohttp.TCPConnector()
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self.session

    @abstractmethod
    def sign(
        self,
        path: str,
        api: str = "public",
        method: str = "GET",
        params: dict[str, Any] | None = None,
    ) -> SignedRequest:
        """Turn a path template and params into a transport-ready request."""
        ...

    @staticmethod
    def is_error_response(response: Any) -> bool:
        return isinstance(response, dict) and "error" in response

    async def fetch(self, request: SignedRequest) -> Any:
        """Perform one HTTP request and return the decoded JSON body.

        Raises:
            TransportError: On network failure, a non-JSON body, or an HTTP error
                status without an exchange error payload
        """
        session = await self._ensure_session()
        logger.debug("%s %s %s", self.name, request.method, request.url)

        try:
            async with session.request(
                request.method,
                request.url,
                headers=request.headers,
                data=request.body,
                proxy=self.proxy.proxy_url,
            ) as resp:
                status = resp.status
                try:
                    data = await resp.json(content_type=None)
                except ValueError as exc:
                    raise TransportError(
                        f"{self.name} {request.method} {request.url} returned a non-JSON body (HTTP {status})",
                        status=status,
                    ) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"{self.name} {request.method} {request.url} failed: {exc}") from exc

        if status >= 400 and not self.is_error_response(data):
            raise TransportError(
                f"{self.name} {request.method} {request.url} failed with HTTP {status}",
                status=status,
            )
        return data

    async def load_markets(self, reload: bool = False) -> MarketCache:
        """Populate the market cache unless it is already loaded."""
        if reload or not self.markets.loaded:
            self.markets.refresh(await self.list_markets())
            logger.info("%s markets loaded: %d", self.name, len(self.markets))
        return self.markets

    def market(self, symbol: str) -> Market:
        return self.markets.get(symbol)

    def market_id(self, symbol: str) -> str:
        return self.markets.get(symbol).id

    @abstractmethod
    async def list_markets(self) -> list[Market]:
        """Fetch the tradable markets."""
        ...

    @abstractmethod
    async def get_balance(self) -> Balances:
        """Fetch account balances."""
        ...

    @abstractmethod
    async def get_order_book(self, symbol: str, params: Mapping[str, Any] | None = None) -> OrderBook:
        """Fetch the order book of a market."""
        ...

    @abstractmethod
    async def get_ticker(self, symbol: str, params: Mapping[str, Any] | None = None) -> Ticker:
        """Fetch the ticker of a market."""
        ...

    @abstractmethod
    async def get_trades(
        self, symbol: str, since: int | None = None, params: Mapping[str, Any] | None = None
    ) -> list[Trade]:
        """Fetch recent public trades of a market."""
        ...

    @abstractmethod
    async def place_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: Decimal | float | str,
        price: Decimal | float | str | None = None,
    ) -> OrderResult:
        """Place a market or limit order."""
        ...

    @abstractmethod
    async def cancel_order(self, order_id: str) -> Any:
        """Cancel an active order."""
        ...

    async def close(self) -> None:
        """Close connections."""
        if self.session:
            await self.session.close()
            self.session = None
