"""
Goldprice.org Market Data Provider
XAU spot per troy ounce, re-quoted per `quote_grams` grams.
"""

from __future__ import annotations

import logging

from dca_dashboard.core.errors import LivePriceError
from dca_dashboard.domain.models import Currency, PriceInfo
from dca_dashboard.infrastructure.market_data.http import request_json, require_number

logger = logging.getLogger(__name__)

TROY_OUNCE_GRAMS = 31.1035


def ounce_to_quote(value: float, quote_grams: float) -> float:
    return (value / TROY_OUNCE_GRAMS) * quote_grams


class GoldPriceProvider:
    name = "goldprice"

    def __init__(self, api_base_url: str, quote_grams: float, timeout: float = 30.0):
        self.api_base_url = api_base_url.rstrip("/")
        self.quote_grams = quote_grams
        self.timeout = timeout

    async def _request_json(self, url: str, label: str):
        return await request_json(url, label, timeout=self.timeout)

    async def get_price(self, currency: Currency) -> PriceInfo:
        label = f"Goldprice.org API for {currency.value}"
        url = f"{self.api_base_url}/dbXRates/{currency.value}"

        payload = await self._request_json(url, label)
        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list) or not items:
            raise LivePriceError("Invalid data from Goldprice.org API")

        raw = items[0]
        xau = require_number(raw, "xauPrice", "Goldprice.org API")
        change = require_number(raw, "chgXau", "Goldprice.org API")
        pct = require_number(raw, "pcXau", "Goldprice.org API")

        return PriceInfo(
            price=ounce_to_quote(xau, self.quote_grams),
            change_24h=ounce_to_quote(change, self.quote_grams),
            change_24h_percentage=pct,
        )
