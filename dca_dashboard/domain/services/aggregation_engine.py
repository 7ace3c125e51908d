"""
AGGREGATION ENGINE
Running totals over DCA purchase rows

RESPONSIBILITIES:
- Chart series: cumulative invested, cumulative units, point value
- Whole-history summary (capital, units, entry price, profit %)
- Per-asset bundles from one sheet

RULES (LOCKED):
❌ Never re-sort rows; sheet order is chronological order
❌ Never value history at today's price
✅ Point value = units held so far x that row's own price
✅ Full recompute every time (no cached partial sums)
"""

import logging
from typing import Dict, List

from dca_dashboard.core.errors import AggregationError, DataSourceError
from dca_dashboard.domain.models import (
    AssetConfig,
    AssetType,
    ChartPoint,
    DcaBundle,
    Summary,
    Transaction,
)
from dca_dashboard.domain.services.transaction_parser import parse_transactions

logger = logging.getLogger(__name__)


def chart_label(tx: Transaction) -> str:
    """Short axis label, e.g. 'Jan 5'."""
    return f"{tx.date.strftime('%b')} {tx.date.day}"


def build_chart_points(transactions: List[Transaction]) -> List[ChartPoint]:
    cumulative_invested = 0.0
    cumulative_amount = 0.0
    points: List[ChartPoint] = []

    for tx in transactions:
        cumulative_invested += tx.invested
        cumulative_amount += tx.asset_purchased
        port_value = cumulative_amount * tx.asset_price
        points.append(
            ChartPoint(
                date=chart_label(tx),
                port_value=round(port_value, 2),
                invested=round(cumulative_invested, 2),
                cumulative_amount=cumulative_amount,
            )
        )

    return points


def build_summary(transactions: List[Transaction]) -> Summary:
    """
    Summarise the whole history at the last recorded price.

    Raises:
        AggregationError: no rows, or units sum to zero
    """
    if not transactions:
        raise AggregationError("Cannot summarise an empty transaction set")

    total_capital = sum(tx.invested for tx in transactions)
    total_amount = sum(tx.asset_purchased for tx in transactions)
    if total_amount == 0:
        raise AggregationError("Total units purchased is zero; entry price is undefined")

    last = transactions[-1]
    port_value = total_amount * last.asset_price
    profit = port_value - total_capital

    return Summary(
        profit_percentage=(profit / total_capital) * 100,
        total_capital=total_capital,
        entry_price=total_capital / total_amount,
        start_date=transactions[0].date,
        port_value=port_value,
        last_updated=last.date,
        total_amount=total_amount,
    )


def process_transactions(transactions: List[Transaction]) -> DcaBundle:
    if not transactions:
        return DcaBundle()

    return DcaBundle(
        transactions=list(transactions),
        chart_points=build_chart_points(transactions),
        summary=build_summary(transactions),
    )


def build_bundle(csv_text: str, asset_config: AssetConfig) -> DcaBundle:
    """
    Parse and aggregate one asset. Structural problems become an errored
    bundle so the other asset can still render.
    """
    asset = asset_config.asset
    try:
        transactions = parse_transactions(csv_text, asset, asset_config.columns)
    except DataSourceError as exc:
        logger.warning("Sheet issue for %s: %s", asset.value, exc)
        return DcaBundle(error=str(exc))

    if not transactions:
        return DcaBundle(
            error=f"No valid transaction rows found for {asset.value}. "
                  f"Please check the data in your Google Sheet."
        )

    try:
        return process_transactions(transactions)
    except AggregationError as exc:
        logger.warning("Aggregation failed for %s: %s", asset.value, exc)
        return DcaBundle(transactions=transactions, error=str(exc))


def build_bundles(csv_text: str, assets: Dict[AssetType, AssetConfig]) -> Dict[AssetType, DcaBundle]:
    bundles = {asset: build_bundle(csv_text, cfg) for asset, cfg in assets.items()}
    logger.info(
        "Built DCA bundles: %s",
        ", ".join(
            f"{asset.value}={len(b.transactions)} rows" if b.error is None else f"{asset.value}=error"
            for asset, b in bundles.items()
        ),
    )
    return bundles
