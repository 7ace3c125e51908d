"""
CoinGecko Market Data Provider
BTC spot price and 24h change per currency.
"""

from __future__ import annotations

import logging

from dca_dashboard.core.errors import LivePriceError
from dca_dashboard.domain.models import Currency, PriceInfo
from dca_dashboard.infrastructure.market_data.http import request_json, require_number

logger = logging.getLogger(__name__)


class CoinGeckoProvider:
    name = "coingecko"

    def __init__(self, api_base_url: str, coin_id: str = "bitcoin", timeout: float = 30.0):
        self.api_base_url = api_base_url.rstrip("/")
        self.coin_id = coin_id
        self.timeout = timeout

    async def _request_json(self, url: str, label: str, params: dict):
        return await request_json(url, label, params=params, timeout=self.timeout)

    async def get_price(self, currency: Currency) -> PriceInfo:
        label = f"CoinGecko API for BTC/{currency.value}"
        url = f"{self.api_base_url}/coins/markets"
        params = {"ids": self.coin_id, "vs_currency": currency.value.lower()}

        payload = await self._request_json(url, label, params)
        if not isinstance(payload, list) or not payload:
            raise LivePriceError("Invalid data from CoinGecko API")

        entry = payload[0]
        info = PriceInfo(
            price=require_number(entry, "current_price", "CoinGecko API"),
            change_24h=require_number(entry, "price_change_24h", "CoinGecko API"),
            change_24h_percentage=require_number(entry, "price_change_percentage_24h", "CoinGecko API"),
        )
        logger.debug("CoinGecko BTC/%s = %s", currency.value, info.price)
        return info
