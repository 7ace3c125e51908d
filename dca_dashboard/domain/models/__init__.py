"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    AssetType,
    Currency,
    DashboardStatus,
    TimeRange,
    BASE_CURRENCY,

    # Entities
    AssetColumns,
    AssetConfig,
    ChartPoint,
    CurrencyPrices,
    DcaBundle,
    LivePriceSnapshot,
    PriceInfo,
    Summary,
    Transaction,
)

__all__ = [
    # Enums
    "AssetType",
    "Currency",
    "DashboardStatus",
    "TimeRange",
    "BASE_CURRENCY",

    # Entities
    "AssetColumns",
    "AssetConfig",
    "ChartPoint",
    "CurrencyPrices",
    "DcaBundle",
    "LivePriceSnapshot",
    "PriceInfo",
    "Summary",
    "Transaction",
]
