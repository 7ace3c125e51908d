"""
Dashboard API Routes
Chart, summary, live prices and transaction history per asset/currency
"""

from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict

from dca_dashboard.core.errors import CurrencyUnavailableError, DashboardUnavailableError
from dca_dashboard.domain.models import AssetType, Currency, TimeRange
from dca_dashboard.services.dashboard_service import DashboardService

router = APIRouter()


# Response models
class ChartPointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    port_value: float
    invested: float
    cumulative_amount: float


class SummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profit_percentage: float
    total_capital: float
    entry_price: float
    start_date: datetime
    port_value: float
    last_updated: datetime
    total_amount: float


class PriceInfoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    price: float
    change_24h: float
    change_24h_percentage: float
    is_static: bool = False


class LivePricePanelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    price: Optional[PriceInfoResponse] = None
    unit_price: Optional[float] = None
    quote_unit: str
    stale: bool
    error: Optional[str] = None
    last_updated: Optional[datetime] = None


class DashboardViewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    asset: AssetType
    currency: Currency
    time_range: TimeRange
    error: Optional[str] = None
    chart: List[ChartPointResponse]
    summary: Optional[SummaryResponse] = None
    live_price: LivePricePanelResponse
    blended: bool
    annotations: List[str]
    display: Dict[str, str]


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: datetime
    invested: float
    asset_price: float
    asset_purchased: float
    display: Dict[str, str]


class CurrencyPricesResponse(BaseModel):
    THB: PriceInfoResponse
    USD: PriceInfoResponse


class LivePricesResponse(BaseModel):
    prices: Dict[str, CurrencyPricesResponse]
    thb_usd_rate: Optional[float] = None
    stale: bool
    error: Optional[str] = None
    last_updated: Optional[datetime] = None


class RefreshResponse(BaseModel):
    refreshed: bool
    status: str
    error: Optional[str] = None
    live_price_error: Optional[str] = None


def _get_dashboard(request: Request) -> DashboardService:
    dashboard = getattr(request.app.state, "dashboard", None)
    if dashboard is None:
        raise HTTPException(status_code=503, detail="Dashboard not initialised")
    return dashboard


@router.get("", response_model=DashboardViewResponse)
async def get_dashboard(
    request: Request,
    asset: AssetType = Query(AssetType.BTC),
    currency: Currency = Query(Currency.THB),
    time_range: TimeRange = Query(TimeRange.Y, alias="range"),
):
    """
    Chart series and blended summary for one asset in one currency
    """
    dashboard = _get_dashboard(request)
    try:
        view = dashboard.get_view(asset, currency, time_range)
    except (DashboardUnavailableError, CurrencyUnavailableError) as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return DashboardViewResponse.model_validate(view)


@router.get("/transactions", response_model=List[TransactionResponse])
async def get_transactions(
    request: Request,
    asset: AssetType = Query(AssetType.BTC),
    currency: Currency = Query(Currency.THB),
):
    """
    Transaction history in the display currency
    """
    dashboard = _get_dashboard(request)
    try:
        rows = dashboard.get_transactions(asset, currency)
    except (DashboardUnavailableError, CurrencyUnavailableError) as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return [TransactionResponse.model_validate(row) for row in rows]


@router.get("/live-prices", response_model=LivePricesResponse)
async def get_live_prices(request: Request):
    """
    Last live price batch, flagged stale when the latest refresh failed
    """
    dashboard = _get_dashboard(request)
    snapshot = dashboard.snapshot
    prices = {}
    if snapshot is not None:
        prices = {
            asset.value: CurrencyPricesResponse(
                THB=PriceInfoResponse.model_validate(currency_prices.thb),
                USD=PriceInfoResponse.model_validate(currency_prices.usd),
            )
            for asset, currency_prices in snapshot.prices.items()
        }
    return LivePricesResponse(
        prices=prices,
        thb_usd_rate=snapshot.fx_rate if snapshot else None,
        stale=snapshot is not None and dashboard.live_price_error is not None,
        error=dashboard.live_price_error,
        last_updated=dashboard.live_price_last_updated,
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(request: Request):
    """
    Reload the sheet and live prices; no-op while another refresh runs
    """
    dashboard = _get_dashboard(request)
    refreshed = await dashboard.refresh_all()
    return RefreshResponse(
        refreshed=refreshed,
        status=dashboard.status.value,
        error=dashboard.error,
        live_price_error=dashboard.live_price_error,
    )
