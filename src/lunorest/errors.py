"""Exception hierarchy for the Luno client."""

from __future__ import annotations

from typing import Any


class LunoError(Exception):
    """Base class for every error raised by lunorest."""


class InputFormatError(LunoError, ValueError):
    """A raw exchange payload is missing a required field or has the wrong type."""

    def __init__(self, message: str, *, field: str | None = None, payload: Any = None):
        super().__init__(message)
        self.field = field
        self.payload = payload


class TransportError(LunoError):
    """The HTTP layer failed before a usable JSON response was obtained."""

    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.status = status


class ExchangeError(LunoError):
    """The exchange answered with an explicit error indicator."""

    def __init__(self, message: str, *, response: Any = None):
        super().__init__(message)
        self.response = response

    @property
    def error_code(self) -> str | None:
        if isinstance(self.response, dict):
            code = self.response.get("error_code")
            return str(code) if code is not None else None
        return None

    @property
    def error_message(self) -> str:
        if isinstance(self.response, dict) and self.response.get("error") is not None:
            return str(self.response["error"])
        return str(self)


class InsufficientFunds(ExchangeError):
    """Account balance cannot cover the requested order or withdrawal."""


class OrderNotFound(ExchangeError):
    """The referenced order does not exist or is already closed."""


class BadSymbol(ExchangeError):
    """Symbol or market id is not present in the loaded markets."""


_CODE_RULES: dict[str, type[ExchangeError]] = {
    "ErrInsufficientBalance": InsufficientFunds,
    "ErrInsufficientFunds": InsufficientFunds,
    "ErrOrderNotFound": OrderNotFound,
    "ErrOrderCanceled": OrderNotFound,
}

_MESSAGE_RULES: tuple[tuple[tuple[str, ...], type[ExchangeError]], ...] = (
    (("insufficient", "balance"), InsufficientFunds),
    (("insufficient", "funds"), InsufficientFunds),
    (("order", "not found"), OrderNotFound),
    (("order", "does not exist"), OrderNotFound),
)


def classify_exchange_error(error: ExchangeError) -> ExchangeError:
    """Refine a generic ExchangeError using the exchange's error code and message text.

    Message text is only consulted when the response carries no error code; an
    unmapped code is left generic.

    Returns a new, more specific error carrying the same message and response, or
    ``error`` itself when nothing matches.
    """
    if type(error) is not ExchangeError:
        return error

    target: type[ExchangeError] | None = None
    code = error.error_code
    if code is not None:
        target = _CODE_RULES.get(code)
    else:
        text = error.error_message.lower()
        for needles, kind in _MESSAGE_RULES:
            if all(needle in text for needle in needles):
                target = kind
                break

    if target is None:
        return error
    return target(str(error), response=error.response)
