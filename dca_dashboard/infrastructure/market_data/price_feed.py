"""
Live price feed - one all-or-nothing batch over both assets and currencies.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from dca_dashboard.config import settings
from dca_dashboard.core.errors import DashboardError, LivePriceError
from dca_dashboard.domain.models import (
    AssetType,
    Currency,
    CurrencyPrices,
    LivePriceSnapshot,
)
from dca_dashboard.domain.services.currency import derive_fx_rate
from dca_dashboard.infrastructure.market_data.coingecko_provider import CoinGeckoProvider
from dca_dashboard.infrastructure.market_data.goldprice_provider import GoldPriceProvider
from dca_dashboard.infrastructure.market_data.types import LivePriceProvider
from dca_dashboard.utils.time import now_local

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Could not fetch live prices."


class LivePriceFeed:
    def __init__(
        self,
        btc_provider: LivePriceProvider,
        gold_provider: LivePriceProvider,
        clock: Callable[[], datetime] = now_local,
    ):
        self.btc_provider = btc_provider
        self.gold_provider = gold_provider
        self._clock = clock

    async def fetch(self) -> LivePriceSnapshot:
        """
        Fetch BTC and gold in THB and USD concurrently.

        Raises:
            LivePriceError: any request failed or any field was missing.
                No partial snapshot is ever returned.
        """
        try:
            btc_usd, btc_thb, gold_thb, gold_usd = await asyncio.gather(
                self.btc_provider.get_price(Currency.USD),
                self.btc_provider.get_price(Currency.THB),
                self.gold_provider.get_price(Currency.THB),
                self.gold_provider.get_price(Currency.USD),
            )
            fx_rate = derive_fx_rate(btc_thb.price, btc_usd.price)
        except DashboardError as exc:
            logger.error("Error fetching live prices: %s", exc)
            raise LivePriceError(f"{FETCH_FAILED_MESSAGE} ({exc})") from exc

        snapshot = LivePriceSnapshot(
            prices={
                AssetType.BTC: CurrencyPrices(thb=btc_thb, usd=btc_usd),
                AssetType.GOLD: CurrencyPrices(thb=gold_thb, usd=gold_usd),
            },
            fx_rate=fx_rate,
            fetched_at=self._clock(),
        )
        logger.info(
            "💱 Live prices: BTC %.2f THB, GOLD %.2f THB, THB/USD %.4f",
            btc_thb.price,
            gold_thb.price,
            fx_rate,
        )
        return snapshot


def get_live_price_feed(gold_quote_grams: Optional[float] = None) -> LivePriceFeed:
    timeout = settings.HTTP_TIMEOUT_SECONDS
    return LivePriceFeed(
        btc_provider=CoinGeckoProvider(settings.COINGECKO_API_BASE_URL, timeout=timeout),
        gold_provider=GoldPriceProvider(
            settings.GOLD_PRICE_API_BASE_URL,
            quote_grams=gold_quote_grams or settings.GOLD_QUOTE_GRAMS,
            timeout=timeout,
        ),
    )
