"""Canonical data model shared by exchange clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator


def iso8601(timestamp: int | None) -> str | None:
    """Format an epoch-ms timestamp as ISO-8601 UTC with millisecond precision."""
    if timestamp is None:
        return None
    dt = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{timestamp % 1000:03d}Z"


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    MARKET = "market"
    LIMIT = "limit"


@dataclass(frozen=True, slots=True)
class Market:
    """A tradable market as listed by the exchange."""

    id: str
    symbol: str
    base: str
    quote: str
    info: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class Account:
    """Balance of a single currency."""

    free: Decimal
    used: Decimal
    total: Decimal

    @classmethod
    def from_components(cls, free: Decimal, reserved: Decimal, unconfirmed: Decimal) -> "Account":
        used = reserved + unconfirmed
        return cls(free=free, used=used, total=free + used)


@dataclass(frozen=True, slots=True)
class Balances:
    """Per-currency accounts plus the raw response they were built from."""

    accounts: dict[str, Account]
    info: Any = field(default=None, compare=False, repr=False)

    @property
    def free(self) -> dict[str, Decimal]:
        return {code: acc.free for code, acc in self.accounts.items()}

    @property
    def used(self) -> dict[str, Decimal]:
        return {code: acc.used for code, acc in self.accounts.items()}

    @property
    def total(self) -> dict[str, Decimal]:
        return {code: acc.total for code, acc in self.accounts.items()}

    def __getitem__(self, currency: str) -> Account:
        return self.accounts[currency]

    def __contains__(self, currency: object) -> bool:
        return currency in self.accounts

    def __iter__(self) -> Iterator[str]:
        return iter(self.accounts)

    def __len__(self) -> int:
        return len(self.accounts)


@dataclass(frozen=True, slots=True)
class OrderBook:
    """Bids and asks as (price, volume) pairs in the order the exchange sent them."""

    bids: tuple[tuple[Decimal, Decimal], ...]
    asks: tuple[tuple[Decimal, Decimal], ...]
    timestamp: int

    @property
    def datetime(self) -> str | None:
        return iso8601(self.timestamp)


@dataclass(frozen=True, slots=True)
class Ticker:
    """Ticker snapshot.

    Fields the exchange does not report stay ``None``; callers must read that as
    "not reported", never as zero.
    """

    symbol: str | None
    timestamp: int
    bid: Decimal
    ask: Decimal
    last: Decimal
    quote_volume: Decimal
    high: Decimal | None = None
    low: Decimal | None = None
    vwap: Decimal | None = None
    open: Decimal | None = None
    close: Decimal | None = None
    first: Decimal | None = None
    change: Decimal | None = None
    percentage: Decimal | None = None
    average: Decimal | None = None
    base_volume: Decimal | None = None
    info: Any = field(default=None, compare=False, repr=False)

    @property
    def datetime(self) -> str | None:
        return iso8601(self.timestamp)


@dataclass(frozen=True, slots=True)
class Trade:
    """A public trade."""

    timestamp: int
    symbol: str
    side: str
    price: Decimal
    amount: Decimal
    id: str | None = None
    order: str | None = None
    type: str | None = None
    info: Any = field(default=None, compare=False, repr=False)

    @property
    def datetime(self) -> str | None:
        return iso8601(self.timestamp)


@dataclass(frozen=True, slots=True)
class OrderResult:
    """Acknowledgement of a newly placed order."""

    id: str
    info: Any = field(default=None, compare=False, repr=False)
