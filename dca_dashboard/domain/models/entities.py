"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class AssetType(str, Enum):
    """Tracked DCA asset"""
    BTC = "BTC"
    GOLD = "GOLD"


class Currency(str, Enum):
    """Display currency (THB is the base currency of the sheet)"""
    THB = "THB"
    USD = "USD"


class TimeRange(str, Enum):
    """Chart window, counted in records rather than calendar days"""
    W = "W"
    M = "M"
    Y = "Y"


class DashboardStatus(str, Enum):
    """Page-level load state"""
    LOADING = "LOADING"
    READY = "READY"
    FAILED = "FAILED"


BASE_CURRENCY = Currency.THB


@dataclass(frozen=True)
class Transaction:
    """
    One purchase row from the DCA sheet.
    Amounts are in the base currency.
    """
    date: datetime
    invested: float
    asset_price: float
    asset_purchased: float


@dataclass(frozen=True)
class ChartPoint:
    """
    Snapshot after a purchase row, marked to market at that row's price.
    """
    date: str
    port_value: float
    invested: float
    cumulative_amount: float


@dataclass(frozen=True)
class Summary:
    """
    Whole-history rollup for one asset.
    """
    profit_percentage: float
    total_capital: float
    entry_price: float
    start_date: datetime
    port_value: float
    last_updated: datetime
    total_amount: float


@dataclass(frozen=True)
class PriceInfo:
    price: float
    change_24h: float
    change_24h_percentage: float
    is_static: bool = False


@dataclass(frozen=True)
class CurrencyPrices:
    thb: PriceInfo
    usd: PriceInfo

    def for_currency(self, currency: Currency) -> PriceInfo:
        if currency == Currency.USD:
            return self.usd
        return self.thb


@dataclass(frozen=True)
class LivePriceSnapshot:
    """
    Result of one complete live price batch.
    fx_rate is THB per USD, derived from the BTC price ratio.
    """
    prices: Dict[AssetType, CurrencyPrices]
    fx_rate: float
    fetched_at: datetime

    def get(self, asset: AssetType, currency: Currency) -> Optional[PriceInfo]:
        prices = self.prices.get(asset)
        if prices is None:
            return None
        return prices.for_currency(currency)


@dataclass(frozen=True)
class DcaBundle:
    """
    Everything derived from the sheet for one asset.
    """
    transactions: List[Transaction] = field(default_factory=list)
    chart_points: List[ChartPoint] = field(default_factory=list)
    summary: Optional[Summary] = None
    error: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return self.error is None and self.summary is not None and len(self.transactions) > 0


@dataclass(frozen=True)
class AssetColumns:
    """
    Exact sheet header names for one asset.
    """
    date: str
    invested: str
    price: str
    purchased: str

    def as_list(self) -> List[str]:
        return [self.date, self.invested, self.price, self.purchased]


@dataclass(frozen=True)
class AssetConfig:
    asset: AssetType
    columns: AssetColumns
    unit_label: str = ""
    static_prices: Dict[Currency, float] = field(default_factory=dict)
