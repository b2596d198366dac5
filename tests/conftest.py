"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from lunorest.exchanges.luno import LunoClient


def create_async_response(status=200, json_data=None):
    """Create a mock async response."""
    resp = AsyncMock()
    resp.status = status
    resp.json = AsyncMock(return_value=json_data if json_data is not None else {})
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=None)
    return resp


def create_routed_session(routes):
    """Create a mock aiohttp session answering by (method, path).

    ``routes`` maps (method, path-without-query) to a JSON payload or to a
    (status, payload) tuple.
    """

    def _request(method, url, **kwargs):
        path = url.split("/api/1/", 1)[1].split("?", 1)[0]
        answer = routes[(method, path)]
        status, payload = answer if isinstance(answer, tuple) else (200, answer)
        return create_async_response(status, payload)

    session = MagicMock()
    session.request = MagicMock(side_effect=_request)
    return session


@pytest.fixture
def api_key():
    """Test API key id."""
    return "test_key_id_123456"


@pytest.fixture
def api_secret():
    """Test API secret."""
    return "test_api_secret_789012"


@pytest.fixture
def sample_tickers_response():
    """Sample tickers response."""
    return {
        "tickers": [
            {
                "pair": "XBTZAR",
                "timestamp": 1500000000000,
                "bid": "45000.00",
                "ask": "45100.00",
                "last_trade": "45050.00",
                "rolling_24_hour_volume": "12.5",
            },
            {
                "pair": "ETHXBT",
                "timestamp": 1500000001000,
                "bid": "0.0640",
                "ask": "0.0650",
                "last_trade": "0.0645",
                "rolling_24_hour_volume": "300.25",
            },
        ]
    }


@pytest.fixture
def sample_balance_response():
    """Sample balance response."""
    return {
        "balance": [
            {"account_id": "1", "asset": "XBT", "balance": "0.5", "reserved": "0.1", "unconfirmed": "0.05"},
            {"account_id": "2", "asset": "ZAR", "balance": "1000.00", "reserved": "0.00", "unconfirmed": "0.00"},
        ]
    }


@pytest.fixture
def sample_order_book_response():
    """Sample order book response."""
    return {
        "timestamp": 1500000000000,
        "bids": [
            {"price": "45000.00", "volume": "0.10"},
            {"price": "44990.00", "volume": "1.25"},
        ],
        "asks": [
            {"price": "45100.00", "volume": "0.30"},
        ],
    }


@pytest.fixture
def sample_trades_response():
    """Sample trades response."""
    return {
        "trades": [
            {"timestamp": 1500000000000, "price": "45050.00", "volume": "0.01", "is_buy": True},
            {"timestamp": 1500000005000, "price": "45040.00", "volume": "0.20", "is_buy": False},
        ]
    }


@pytest.fixture
def make_client(api_key, api_secret, sample_tickers_response):
    """Build a LunoClient whose session answers from a route table.

    The tickers route is always present so markets can load.
    """

    def _make(routes=None, **kwargs):
        table = {("GET", "tickers"): sample_tickers_response}
        table.update(routes or {})
        client = LunoClient(api_key, api_secret, **kwargs)
        session = create_routed_session(table)
        client._ensure_session = AsyncMock(return_value=session)
        return client, session

    return _make
