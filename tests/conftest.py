from datetime import datetime
from pathlib import Path
from typing import AsyncGenerator, Optional

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from dca_dashboard.api.routes import dashboard as dashboard_routes, health
from dca_dashboard.domain.models import (
    AssetType,
    CurrencyPrices,
    LivePriceSnapshot,
    PriceInfo,
)
from dca_dashboard.domain.services.config_engine import ConfigEngine
from dca_dashboard.services.dashboard_service import DashboardService

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"

GOLD_QUOTE_GRAMS = 14.71

SAMPLE_CSV = (
    "Date,Invested (THB),BTC Price (THB),BTC Purchased,"
    "Gold Date,Invested Gold (THB),Gold Price (THB),Gold Purchased (g)\n"
    "2024-01-01,100,50000,0.002,2024-01-01,1000,2000,0.5\n"
    "2024-01-08,100,60000,0.00167,2024-01-08,1000,2500,0.4\n"
)

# THB per USD = 3,500,000 / 100,000
FX_RATE = 35.0


def make_snapshot(btc_thb: float = 3_500_000.0, btc_usd: float = 100_000.0) -> LivePriceSnapshot:
    gold_thb = 2000.0 * GOLD_QUOTE_GRAMS
    return LivePriceSnapshot(
        prices={
            AssetType.BTC: CurrencyPrices(
                thb=PriceInfo(price=btc_thb, change_24h=35_000.0, change_24h_percentage=1.0),
                usd=PriceInfo(price=btc_usd, change_24h=1_000.0, change_24h_percentage=1.0),
            ),
            AssetType.GOLD: CurrencyPrices(
                thb=PriceInfo(price=gold_thb, change_24h=-100.0, change_24h_percentage=-0.34),
                usd=PriceInfo(price=gold_thb / (btc_thb / btc_usd), change_24h=-2.0, change_24h_percentage=-0.34),
            ),
        },
        fx_rate=btc_thb / btc_usd,
        fetched_at=datetime(2024, 1, 10, 9, 30, 0),
    )


class StubSheetClient:
    def __init__(self, csv_text: str = SAMPLE_CSV, error: Optional[Exception] = None):
        self.csv_text = csv_text
        self.error = error
        self.calls = 0

    async def fetch_csv(self) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.csv_text


class StubPriceFeed:
    def __init__(self, snapshot: Optional[LivePriceSnapshot] = None, error: Optional[Exception] = None):
        self.snapshot = snapshot if snapshot is not None else make_snapshot()
        self.error = error
        self.calls = 0

    async def fetch(self) -> LivePriceSnapshot:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.snapshot


@pytest.fixture()
def config_engine() -> ConfigEngine:
    engine = ConfigEngine(CONFIG_DIR)
    engine.load_all()
    return engine


@pytest.fixture()
def sheet_client() -> StubSheetClient:
    return StubSheetClient()


@pytest.fixture()
def price_feed() -> StubPriceFeed:
    return StubPriceFeed()


@pytest.fixture()
def dashboard(config_engine, sheet_client, price_feed) -> DashboardService:
    return DashboardService(
        config_engine=config_engine,
        sheet_client=sheet_client,
        price_feed=price_feed,
        gold_quote_grams=GOLD_QUOTE_GRAMS,
    )


@pytest.fixture()
async def app(dashboard) -> FastAPI:
    app = FastAPI()
    app.include_router(health.router, tags=["Health"])
    app.include_router(dashboard_routes.router, prefix="/api/v1/dashboard", tags=["Dashboard"])
    await dashboard.load_initial()
    app.state.dashboard = dashboard
    app.state.scheduler = None
    return app


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

