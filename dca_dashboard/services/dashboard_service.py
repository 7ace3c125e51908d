"""
Dashboard Service
Owns the loaded sheet data and the live price snapshot, and derives views.

State machine:
    LOADING -> READY   initial sheet load succeeded
    LOADING -> FAILED  initial sheet load failed, nothing cached
A price refresh never changes the state; a failure only annotates it.

Every refresh builds new bundles / a new snapshot and swaps them in with a
single assignment. Views are recomputed from scratch on each call.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from dca_dashboard.core.errors import (
    DashboardUnavailableError,
    DataSourceError,
    LivePriceError,
)
from dca_dashboard.domain.models import (
    AssetType,
    ChartPoint,
    Currency,
    DashboardStatus,
    DcaBundle,
    LivePriceSnapshot,
    PriceInfo,
    Summary,
    TimeRange,
)
from dca_dashboard.domain.services.aggregation_engine import build_bundles
from dca_dashboard.domain.services.config_engine import ConfigEngine
from dca_dashboard.domain.services.currency import conversion_rate, convert
from dca_dashboard.domain.services.live_blending import (
    blend_summary,
    convert_chart_points,
    price_per_record_unit,
)
from dca_dashboard.domain.services.time_range import slice_for_range
from dca_dashboard.infrastructure.market_data.price_feed import LivePriceFeed
from dca_dashboard.infrastructure.sheets.sheet_client import SheetClient
from dca_dashboard.utils import formatters

logger = logging.getLogger(__name__)

ESTIMATE_NOTICE = "Amount in Portfolio is estimated value and may not be the same as actual value"


@dataclass(frozen=True)
class LivePricePanel:
    price: Optional[PriceInfo]
    unit_price: Optional[float]
    quote_unit: str
    stale: bool
    error: Optional[str]
    last_updated: Optional[datetime]


@dataclass(frozen=True)
class DashboardView:
    asset: AssetType
    currency: Currency
    time_range: TimeRange
    error: Optional[str]
    chart: List[ChartPoint]
    summary: Optional[Summary]
    live_price: LivePricePanel
    blended: bool
    annotations: List[str] = field(default_factory=list)
    display: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TransactionRow:
    date: datetime
    invested: float
    asset_price: float
    asset_purchased: float
    display: Dict[str, str]


class DashboardService:
    def __init__(
        self,
        config_engine: ConfigEngine,
        sheet_client: SheetClient,
        price_feed: LivePriceFeed,
        gold_quote_grams: float,
    ):
        self._config = config_engine
        self._sheet_client = sheet_client
        self._price_feed = price_feed
        self._gold_quote_grams = gold_quote_grams

        self.status = DashboardStatus.LOADING
        self.error: Optional[str] = None
        self._bundles: Optional[Dict[AssetType, DcaBundle]] = None
        self._snapshot: Optional[LivePriceSnapshot] = None
        self.live_price_error: Optional[str] = None
        self.live_price_last_updated: Optional[datetime] = None
        self._refreshing = False

    # ------------------------------------------------------------------
    # STATE
    # ------------------------------------------------------------------

    @property
    def is_refreshing(self) -> bool:
        return self._refreshing

    @property
    def snapshot(self) -> Optional[LivePriceSnapshot]:
        return self._snapshot

    @property
    def blending_enabled(self) -> bool:
        return self._snapshot is not None and self.live_price_error is None

    # ------------------------------------------------------------------
    # LOADING
    # ------------------------------------------------------------------

    async def _load_bundles(self) -> Dict[AssetType, DcaBundle]:
        csv_text = await self._sheet_client.fetch_csv()
        return build_bundles(csv_text, self._config.assets)

    def _apply_prices(self, result) -> None:
        if isinstance(result, LivePriceSnapshot):
            self._snapshot = result
            self.live_price_error = None
            self.live_price_last_updated = result.fetched_at
            return
        if isinstance(result, LivePriceError):
            self.live_price_error = str(result)
            logger.warning("⚠️ Live price refresh failed: %s", result)
            return
        raise result

    async def _load(self) -> None:
        if self._bundles is None:
            self.status = DashboardStatus.LOADING

        bundles_result, prices_result = await asyncio.gather(
            self._load_bundles(),
            self._price_feed.fetch(),
            return_exceptions=True,
        )

        if isinstance(bundles_result, DataSourceError):
            self.error = str(bundles_result)
            if self._bundles is None:
                self.status = DashboardStatus.FAILED
                logger.error("❌ Initial sheet load failed: %s", bundles_result)
            else:
                logger.warning("⚠️ Sheet reload failed, keeping previous data: %s", bundles_result)
        elif isinstance(bundles_result, BaseException):
            raise bundles_result
        else:
            self._bundles = bundles_result
            self.error = None
            self.status = DashboardStatus.READY

        self._apply_prices(prices_result)

    async def load_initial(self) -> DashboardStatus:
        """Fetch the sheet and live prices together."""
        await self._load()
        logger.info("✅ Dashboard load finished: %s", self.status.value)
        return self.status

    async def refresh_all(self) -> bool:
        """
        Manual refresh of sheet and prices.

        Returns False without doing anything if a refresh is already running.
        """
        if self._refreshing:
            logger.info("Refresh already in progress; skipping")
            return False
        self._refreshing = True
        try:
            await self._load()
        finally:
            self._refreshing = False
        return True

    async def refresh_prices(self) -> bool:
        """Timer tick: live prices only."""
        if self._refreshing:
            logger.debug("Refresh already in progress; skipping price tick")
            return False
        self._refreshing = True
        try:
            try:
                result = await self._price_feed.fetch()
            except LivePriceError as exc:
                result = exc
            self._apply_prices(result)
        finally:
            self._refreshing = False
        return True

    # ------------------------------------------------------------------
    # VIEWS
    # ------------------------------------------------------------------

    def _require_bundle(self, asset: AssetType) -> DcaBundle:
        if self._bundles is None:
            if self.status == DashboardStatus.FAILED:
                raise DashboardUnavailableError(self.error or "Initial data load failed")
            raise DashboardUnavailableError("Dashboard data is still loading")
        return self._bundles.get(asset) or DcaBundle(error=f"No data available to display for {asset.value}.")

    def _fx_rate(self) -> Optional[float]:
        return self._snapshot.fx_rate if self._snapshot else None

    def _live_price_panel(self, asset: AssetType, currency: Currency) -> LivePricePanel:
        quote_unit = f"{self._gold_quote_grams:g}g" if asset == AssetType.GOLD else "1 BTC"

        price = self._snapshot.get(asset, currency) if self._snapshot else None
        if price is None:
            static = self._config.get_asset(asset).static_prices.get(currency)
            if static is not None:
                price = PriceInfo(price=static, change_24h=0.0, change_24h_percentage=0.0, is_static=True)

        unit_price = None
        if price is not None and not price.is_static:
            unit_price = price_per_record_unit(asset, price, self._gold_quote_grams)

        return LivePricePanel(
            price=price,
            unit_price=unit_price,
            quote_unit=quote_unit,
            stale=self._snapshot is not None and self.live_price_error is not None,
            error=self.live_price_error,
            last_updated=self.live_price_last_updated,
        )

    def get_view(self, asset: AssetType, currency: Currency, time_range: TimeRange) -> DashboardView:
        bundle = self._require_bundle(asset)
        panel = self._live_price_panel(asset, currency)
        annotations = [self.live_price_error] if self.live_price_error else []

        if not bundle.has_data:
            return DashboardView(
                asset=asset,
                currency=currency,
                time_range=time_range,
                error=bundle.error or f"No data available to display for {asset.value}.",
                chart=[],
                summary=None,
                live_price=panel,
                blended=False,
                annotations=annotations,
            )

        rate = conversion_rate(currency, self._fx_rate())
        live_unit_price = panel.unit_price if self.blending_enabled else None

        summary = blend_summary(bundle.summary, rate, live_unit_price)
        chart = convert_chart_points(slice_for_range(bundle.chart_points, time_range), rate)
        annotations.append(ESTIMATE_NOTICE)

        return DashboardView(
            asset=asset,
            currency=currency,
            time_range=time_range,
            error=None,
            chart=chart,
            summary=summary,
            live_price=panel,
            blended=live_unit_price is not None,
            annotations=annotations,
            display=self._display_summary(asset, currency, summary, panel),
        )

    def _display_summary(
        self,
        asset: AssetType,
        currency: Currency,
        summary: Summary,
        panel: LivePricePanel,
    ) -> Dict[str, str]:
        unit = self._config.get_asset(asset).unit_label
        cur = currency.value
        display = {
            "symbol": f"{asset.value} {cur}",
            "profit": formatters.format_percentage(summary.profit_percentage),
            "capital": formatters.format_currency(summary.total_capital, cur),
            "capital_compact": formatters.format_compact_number(summary.total_capital),
            "entry_price": formatters.format_currency(summary.entry_price, cur),
            "port_value": formatters.format_currency(summary.port_value, cur),
            "holdings": formatters.format_amount(summary.total_amount, unit),
            "start": formatters.format_date(summary.start_date),
            "start_full": formatters.format_full_date(summary.start_date),
            "as_of": formatters.format_date(summary.last_updated),
        }
        if panel.price is not None:
            display["live_price"] = formatters.format_currency(panel.price.price, cur)
            if panel.price.is_static:
                display["live_change"] = "Static"
            else:
                display["live_change"] = (
                    f"{formatters.format_signed_currency(panel.price.change_24h, cur)} "
                    f"({formatters.format_percentage(panel.price.change_24h_percentage)} 24h)"
                )
        if panel.last_updated is not None:
            display["updated"] = formatters.format_time(panel.last_updated)
        return display

    def get_transactions(self, asset: AssetType, currency: Currency) -> List[TransactionRow]:
        bundle = self._require_bundle(asset)
        if not bundle.has_data:
            return []

        rate = conversion_rate(currency, self._fx_rate())
        unit = self._config.get_asset(asset).unit_label
        rows = []
        for tx in bundle.transactions:
            invested = convert(tx.invested, rate)
            price = convert(tx.asset_price, rate)
            rows.append(
                TransactionRow(
                    date=tx.date,
                    invested=invested,
                    asset_price=price,
                    asset_purchased=tx.asset_purchased,
                    display={
                        "date": formatters.format_date(tx.date),
                        "invested": formatters.format_currency(invested, currency.value),
                        "asset_price": formatters.format_currency(price, currency.value),
                        "asset_purchased": formatters.format_amount(tx.asset_purchased, unit),
                    },
                )
            )
        return rows

    def get_status(self) -> Dict[str, object]:
        return {
            "status": self.status.value,
            "error": self.error,
            "refreshing": self._refreshing,
            "live_prices": self._snapshot is not None,
            "live_price_error": self.live_price_error,
            "live_price_last_updated": (
                self.live_price_last_updated.isoformat() if self.live_price_last_updated else None
            ),
            "assets": {
                asset.value: ("error" if not bundle.has_data else len(bundle.transactions))
                for asset, bundle in (self._bundles or {}).items()
            },
        }
