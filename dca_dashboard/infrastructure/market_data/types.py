"""
Live price provider protocol for type hints.
"""

from __future__ import annotations

from typing import Protocol

from dca_dashboard.domain.models import Currency, PriceInfo


class LivePriceProvider(Protocol):
    name: str

    async def get_price(self, currency: Currency) -> PriceInfo:
        ...
