"""Exchange client initialization from settings."""

from __future__ import annotations

import logging

from ..settings import Settings
from .base import ProxyConfig
from .luno import LunoClient
from .markets import MarketCache
from .normalization import CurrencyCanonicalizer

logger = logging.getLogger(__name__)


def create_client_from_settings(settings: Settings, markets: MarketCache | None = None) -> LunoClient:
    """Create a Luno client from settings configuration.

    Without credentials the client can still reach public endpoints; private calls
    will be rejected by the exchange.
    """
    luno = settings.luno

    api_key = api_secret = ""
    if luno.credentials:
        api_key = luno.credentials.api_key_id.get_secret_value()
        api_secret = luno.credentials.api_secret.get_secret_value()
    else:
        logger.warning("Luno has no credentials configured, only public endpoints will work")

    proxy = None
    if settings.proxy.enabled and settings.proxy.url:
        proxy = ProxyConfig(
            url=settings.proxy.url,
            username=settings.proxy.username,
            password=settings.proxy.password.get_secret_value() if settings.proxy.password else None,
        )

    client = LunoClient(
        api_key,
        api_secret,
        base_url=luno.base_url,
        version=luno.version,
        markets=markets,
        currencies=CurrencyCanonicalizer(luno.currency_aliases),
        proxy=proxy,
        timeout=luno.timeout,
    )
    logger.debug("Initialized Luno client for %s", client.get_base_url())
    return client
