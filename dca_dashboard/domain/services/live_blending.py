"""
LIVE BLENDING
Override the "now" valuation with a live price

A pure recomputation from the historical summary on every call: the chart
history keeps its own recorded prices, only the current port value and
profit move with the live feed.
"""

from dataclasses import replace
from typing import List, Optional

from dca_dashboard.domain.models import AssetType, ChartPoint, PriceInfo, Summary
from dca_dashboard.domain.services.currency import convert


def price_per_record_unit(
    asset: AssetType,
    price_info: Optional[PriceInfo],
    gold_quote_grams: float,
) -> Optional[float]:
    """
    Live price per unit the sheet records in (BTC: coins, GOLD: grams).

    Gold arrives quoted per `gold_quote_grams` grams.
    """
    if price_info is None:
        return None
    if asset == AssetType.GOLD:
        return price_info.price / gold_quote_grams
    return price_info.price


def blend_summary(
    summary: Summary,
    conversion_rate: float,
    live_unit_price: Optional[float] = None,
) -> Summary:
    """
    Summary in display currency, marked to the live price when one is given.

    `live_unit_price` must already be in the display currency.
    """
    total_capital = convert(summary.total_capital, conversion_rate)
    entry_price = convert(summary.entry_price, conversion_rate)
    port_value = convert(summary.port_value, conversion_rate)
    profit_percentage = summary.profit_percentage

    if live_unit_price is not None:
        port_value = summary.total_amount * live_unit_price
        profit_percentage = ((port_value - total_capital) / total_capital) * 100

    return replace(
        summary,
        total_capital=total_capital,
        entry_price=entry_price,
        port_value=port_value,
        profit_percentage=profit_percentage,
    )


def convert_chart_points(points: List[ChartPoint], conversion_rate: float) -> List[ChartPoint]:
    return [
        replace(
            p,
            port_value=convert(p.port_value, conversion_rate),
            invested=convert(p.invested, conversion_rate),
        )
        for p in points
    ]
