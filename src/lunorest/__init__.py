"""lunorest: Luno REST client with a canonical market data model."""

from .settings import Settings
from .errors import (
    BadSymbol,
    ExchangeError,
    InputFormatError,
    InsufficientFunds,
    LunoError,
    OrderNotFound,
    TransportError,
)
from .exchanges import LunoClient, MarketCache

__all__ = [
    "Settings",
    "LunoError",
    "InputFormatError",
    "TransportError",
    "ExchangeError",
    "InsufficientFunds",
    "OrderNotFound",
    "BadSymbol",
    "LunoClient",
    "MarketCache",
]
