"""Shared market cache."""

from __future__ import annotations

import logging
from typing import Iterable

from ..errors import BadSymbol
from .protocol import Market

logger = logging.getLogger(__name__)


class MarketCache:
    """Markets indexed by symbol and by exchange id.

    Populated once per session through :meth:`refresh` and read many times. Clients
    receive the cache in their constructor, so several clients may share one.
    """

    def __init__(self) -> None:
        self._markets: list[Market] = []
        self._by_symbol: dict[str, Market] = {}
        self._by_id: dict[str, Market] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def markets(self) -> list[Market]:
        return list(self._markets)

    @property
    def symbols(self) -> list[str]:
        return list(self._by_symbol)

    def refresh(self, markets: Iterable[Market]) -> None:
        """Replace the cache contents. Later duplicates win in both indexes."""
        items = list(markets)
        self._markets = items
        self._by_symbol = {m.symbol: m for m in items}
        self._by_id = {m.id: m for m in items}
        self._loaded = True
        logger.debug("Market cache refreshed with %d markets", len(items))

    def get(self, symbol: str) -> Market:
        try:
            return self._by_symbol[symbol]
        except KeyError:
            raise BadSymbol(f"luno does not have market symbol {symbol}") from None

    def by_id(self, market_id: str) -> Market:
        try:
            return self._by_id[market_id]
        except KeyError:
            raise BadSymbol(f"luno does not have market id {market_id}") from None

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def __len__(self) -> int:
        return len(self._markets)
