"""Currency, symbol and raw-field normalization utilities."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from ..errors import InputFormatError
from .protocol import OrderBook

logger = logging.getLogger(__name__)

_MISSING = object()

# Exchange tickers that differ from the codes used across the rest of the market.
DEFAULT_CURRENCY_ALIASES: dict[str, str] = {
    "XBT": "BTC",
    "BCC": "BCH",
    "DRK": "DASH",
}


class CurrencyCanonicalizer:
    """Map exchange-native currency codes to their common codes."""

    def __init__(self, aliases: Mapping[str, str] | None = None):
        self.aliases = dict(DEFAULT_CURRENCY_ALIASES)
        if aliases:
            self.aliases.update(aliases)

    def normalize(self, code: str) -> str:
        return self.aliases.get(code, code)


def split_pair_id(pair_id: Any) -> tuple[str, str]:
    """Split a fixed-width pair id into its three-character base and quote.

    XBTZAR -> (XBT, ZAR)

    Raises:
        InputFormatError: If the id is not a string of at least six characters
    """
    if not isinstance(pair_id, str) or len(pair_id) < 6:
        raise InputFormatError(f"Invalid pair id: {pair_id!r}", field="pair", payload=pair_id)
    if len(pair_id) > 6:
        logger.debug("Pair id %s is longer than six characters, using %s", pair_id, pair_id[:6])
    return pair_id[0:3], pair_id[3:6]


def make_symbol(base: str, quote: str) -> str:
    return f"{base}/{quote}"


def require(raw: Any, key: str) -> Any:
    """Return ``raw[key]`` or raise InputFormatError if ``raw`` has no such key."""
    if not isinstance(raw, Mapping):
        raise InputFormatError(
            f"Expected a JSON object holding {key!r}, got {type(raw).__name__}",
            field=key,
            payload=raw,
        )
    value = raw.get(key, _MISSING)
    if value is _MISSING or value is None:
        raise InputFormatError(f"Missing required field {key!r}", field=key, payload=raw)
    return value


def parse_decimal(value: Any, field: str = "value") -> Decimal:
    """Parse a JSON number or numeric string as a finite Decimal.

    Raises:
        InputFormatError: If the value is missing, boolean, or not numeric
    """
    if value is None or isinstance(value, bool):
        raise InputFormatError(f"Field {field!r} is not numeric: {value!r}", field=field, payload=value)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation as exc:
            raise InputFormatError(
                f"Field {field!r} is not numeric: {value!r}", field=field, payload=value
            ) from exc
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        raise InputFormatError(f"Field {field!r} is not numeric: {value!r}", field=field, payload=value)

    if not result.is_finite():
        raise InputFormatError(f"Field {field!r} is not finite: {value!r}", field=field, payload=value)
    return result


def parse_timestamp(value: Any, field: str = "timestamp") -> int:
    """Validate an epoch-ms timestamp; integers only."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputFormatError(
            f"Field {field!r} must be an integer timestamp, got {value!r}",
            field=field,
            payload=value,
        )
    return value


def parse_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise InputFormatError(f"Field {field!r} must be a boolean, got {value!r}", field=field, payload=value)
    return value


def parse_order_book(
    raw: Mapping[str, Any],
    timestamp: Any,
    bids_key: str = "bids",
    asks_key: str = "asks",
    price_key: str | int = 0,
    amount_key: str | int = 1,
) -> OrderBook:
    """Build an OrderBook from a raw payload.

    Field names are supplied by the caller so the same routine serves payloads that
    store levels as objects (``{"price": .., "volume": ..}``) or as positional arrays.
    Levels keep the exchange's ordering.

    Args:
        raw: Decoded order book payload
        timestamp: Epoch-ms timestamp of the snapshot
        bids_key: Key of the bid levels
        asks_key: Key of the ask levels
        price_key: Key or index of the price inside a level
        amount_key: Key or index of the volume inside a level

    Returns:
        Normalized OrderBook

    Raises:
        InputFormatError: If a side or level is missing or malformed
    """

    def _side(key: str) -> tuple[tuple[Decimal, Decimal], ...]:
        levels = require(raw, key)
        if not isinstance(levels, list):
            raise InputFormatError(f"Order book side {key!r} must be a list", field=key, payload=levels)
        parsed = []
        for level in levels:
            try:
                price = level[price_key]
                amount = level[amount_key]
            except (KeyError, IndexError, TypeError) as exc:
                raise InputFormatError(
                    f"Malformed order book level in {key!r}: {level!r}", field=key, payload=level
                ) from exc
            parsed.append((parse_decimal(price, str(price_key)), parse_decimal(amount, str(amount_key))))
        return tuple(parsed)

    return OrderBook(
        bids=_side(bids_key),
        asks=_side(asks_key),
        timestamp=parse_timestamp(timestamp),
    )
