import asyncio

import pytest

from conftest import GOLD_QUOTE_GRAMS, StubPriceFeed, StubSheetClient, make_snapshot
from dca_dashboard.core.errors import (
    CurrencyUnavailableError,
    DashboardUnavailableError,
    DataSourceError,
    LivePriceError,
)
from dca_dashboard.domain.models import AssetType, Currency, DashboardStatus, TimeRange
from dca_dashboard.services.dashboard_service import ESTIMATE_NOTICE, DashboardService


def _service(config_engine, sheet=None, feed=None) -> DashboardService:
    return DashboardService(
        config_engine=config_engine,
        sheet_client=sheet or StubSheetClient(),
        price_feed=feed or StubPriceFeed(),
        gold_quote_grams=GOLD_QUOTE_GRAMS,
    )


@pytest.mark.asyncio
async def test_initial_load_ready(dashboard, sheet_client, price_feed):
    assert dashboard.status == DashboardStatus.LOADING

    status = await dashboard.load_initial()

    assert status == DashboardStatus.READY
    assert sheet_client.calls == 1
    assert price_feed.calls == 1
    assert dashboard.live_price_error is None
    assert dashboard.blending_enabled


@pytest.mark.asyncio
async def test_initial_sheet_failure_is_failed_state(config_engine):
    service = _service(config_engine, sheet=StubSheetClient(error=DataSourceError("Failed to fetch from Google Sheets: 404")))

    status = await service.load_initial()

    assert status == DashboardStatus.FAILED
    assert service.error == "Failed to fetch from Google Sheets: 404"
    with pytest.raises(DashboardUnavailableError):
        service.get_view(AssetType.BTC, Currency.THB, TimeRange.Y)


@pytest.mark.asyncio
async def test_views_before_load_are_unavailable(dashboard):
    with pytest.raises(DashboardUnavailableError):
        dashboard.get_view(AssetType.BTC, Currency.THB, TimeRange.Y)


@pytest.mark.asyncio
async def test_live_blending_in_view(dashboard):
    await dashboard.load_initial()

    view = dashboard.get_view(AssetType.BTC, Currency.THB, TimeRange.Y)

    assert view.blended
    assert view.summary.port_value == pytest.approx(0.00367 * 3_500_000)
    assert view.summary.total_capital == 200.0
    # history keeps its recorded prices
    assert view.chart[-1].port_value == pytest.approx(220.2)
    assert view.annotations == [ESTIMATE_NOTICE]
    assert view.display["capital"] == "200.00 THB"
    assert view.display["capital_compact"] == "200"
    assert view.display["start_full"] == "01/01/2024 12:00:00 AM"


@pytest.mark.asyncio
async def test_gold_blends_per_gram(dashboard):
    await dashboard.load_initial()

    view = dashboard.get_view(AssetType.GOLD, Currency.THB, TimeRange.Y)

    # live quote is 2000 THB/g, 0.9 g held
    assert view.live_price.unit_price == pytest.approx(2000.0)
    assert view.summary.port_value == pytest.approx(1800.0)
    assert view.summary.profit_percentage == pytest.approx(-10.0)
    assert view.live_price.quote_unit == "14.71g"


@pytest.mark.asyncio
async def test_usd_view_converts_with_btc_ratio(dashboard):
    await dashboard.load_initial()

    thb = dashboard.get_view(AssetType.BTC, Currency.THB, TimeRange.Y)
    usd = dashboard.get_view(AssetType.BTC, Currency.USD, TimeRange.Y)

    assert usd.summary.total_capital == pytest.approx(200.0 / 35)
    assert usd.summary.port_value == pytest.approx(0.00367 * 100_000)
    assert usd.summary.profit_percentage == pytest.approx(thb.summary.profit_percentage)
    assert usd.chart[0].invested == pytest.approx(100.0 / 35)


@pytest.mark.asyncio
async def test_time_range_slices_records(config_engine):
    header = "Date,Invested (THB),BTC Price (THB),BTC Purchased,Gold Date,Invested Gold (THB),Gold Price (THB),Gold Purchased (g)"
    rows = [f"2024-01-{d:02d},100,50000,0.002,2024-01-{d:02d},1000,2000,0.5" for d in range(1, 11)]
    service = _service(config_engine, sheet=StubSheetClient("\n".join([header] + rows)))
    await service.load_initial()

    week = service.get_view(AssetType.BTC, Currency.THB, TimeRange.W)
    full = service.get_view(AssetType.BTC, Currency.THB, TimeRange.Y)

    assert len(week.chart) == 7
    assert len(full.chart) == 10
    assert week.chart[0].date == "Jan 4"
    # summary always covers the whole history
    assert week.summary == full.summary


@pytest.mark.asyncio
async def test_price_failure_at_startup_still_renders_history(config_engine):
    service = _service(config_engine, feed=StubPriceFeed(error=LivePriceError("Could not fetch live prices.")))

    status = await service.load_initial()
    view = service.get_view(AssetType.BTC, Currency.THB, TimeRange.Y)

    assert status == DashboardStatus.READY
    assert not view.blended
    assert view.summary.port_value == pytest.approx(220.2)
    assert view.summary.profit_percentage == pytest.approx(10.1)
    assert "Could not fetch live prices." in view.annotations
    assert view.live_price.price is None
    with pytest.raises(CurrencyUnavailableError):
        service.get_view(AssetType.BTC, Currency.USD, TimeRange.Y)


@pytest.mark.asyncio
async def test_failed_price_refresh_keeps_ready_and_disables_blending(dashboard, price_feed):
    await dashboard.load_initial()
    price_feed.error = LivePriceError("Could not fetch live prices.")

    ran = await dashboard.refresh_prices()
    view = dashboard.get_view(AssetType.BTC, Currency.USD, TimeRange.Y)

    assert ran
    assert dashboard.status == DashboardStatus.READY
    assert dashboard.live_price_error == "Could not fetch live prices."
    assert not view.blended
    assert view.live_price.stale
    assert view.live_price.price is not None
    # historical valuation, converted with the last known rate
    assert view.summary.port_value == pytest.approx(220.2 / 35)


@pytest.mark.asyncio
async def test_successful_refresh_replaces_snapshot_and_clears_error(dashboard, price_feed):
    await dashboard.load_initial()
    price_feed.error = LivePriceError("boom")
    await dashboard.refresh_prices()

    price_feed.error = None
    price_feed.snapshot = make_snapshot(btc_thb=4_000_000.0, btc_usd=100_000.0)
    await dashboard.refresh_prices()

    assert dashboard.live_price_error is None
    assert dashboard.snapshot.fx_rate == 40.0
    view = dashboard.get_view(AssetType.BTC, Currency.THB, TimeRange.Y)
    assert view.summary.port_value == pytest.approx(0.00367 * 4_000_000)


@pytest.mark.asyncio
async def test_concurrent_refresh_is_a_noop(dashboard, price_feed):
    await dashboard.load_initial()
    gate = asyncio.Event()
    original_fetch = price_feed.fetch

    async def slow_fetch():
        await gate.wait()
        return await original_fetch()

    price_feed.fetch = slow_fetch

    first = asyncio.create_task(dashboard.refresh_all())
    await asyncio.sleep(0)
    assert dashboard.is_refreshing

    assert await dashboard.refresh_prices() is False
    assert await dashboard.refresh_all() is False

    gate.set()
    assert await first is True
    assert not dashboard.is_refreshing


@pytest.mark.asyncio
async def test_sheet_reload_failure_keeps_previous_data(dashboard, sheet_client):
    await dashboard.load_initial()
    sheet_client.error = DataSourceError("Failed to fetch from Google Sheets: 500")

    await dashboard.refresh_all()

    assert dashboard.status == DashboardStatus.READY
    assert dashboard.error == "Failed to fetch from Google Sheets: 500"
    assert dashboard.get_view(AssetType.BTC, Currency.THB, TimeRange.Y).summary is not None


@pytest.mark.asyncio
async def test_structural_error_view(config_engine):
    csv_text = (
        "Date,Invested (THB),BTC Price (THB),"
        "Gold Date,Invested Gold (THB),Gold Price (THB),Gold Purchased (g)\n"
        "2024-01-01,100,50000,2024-01-01,1000,2000,0.5\n"
    )
    service = _service(config_engine, sheet=StubSheetClient(csv_text))
    await service.load_initial()

    view = service.get_view(AssetType.BTC, Currency.THB, TimeRange.Y)

    assert service.status == DashboardStatus.READY
    assert "BTC Purchased" in view.error
    assert view.chart == []
    assert view.summary is None
    assert service.get_transactions(AssetType.BTC, Currency.THB) == []
    assert service.get_view(AssetType.GOLD, Currency.THB, TimeRange.Y).error is None


@pytest.mark.asyncio
async def test_transactions_in_display_currency(dashboard):
    await dashboard.load_initial()

    rows = dashboard.get_transactions(AssetType.GOLD, Currency.USD)

    assert len(rows) == 2
    assert rows[0].invested == pytest.approx(1000 / 35)
    assert rows[0].asset_purchased == 0.5
    assert rows[0].display["asset_purchased"] == "0.50000000 g"
    assert rows[0].display["date"] == "01 Jan 2024"
