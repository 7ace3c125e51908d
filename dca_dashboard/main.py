"""
FastAPI Main Application with Live Price Scheduler
DCA journey dashboard for BTC and gold
"""

from contextlib import asynccontextmanager
from pathlib import Path
import logging
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dca_dashboard.config import settings
from dca_dashboard.core.logging import setup_logging
from dca_dashboard.domain.services.config_engine import ConfigEngine
from dca_dashboard.infrastructure.market_data.price_feed import get_live_price_feed
from dca_dashboard.infrastructure.sheets.sheet_client import SheetClient
from dca_dashboard.scheduler.scheduler import PriceRefreshScheduler
from dca_dashboard.services.dashboard_service import DashboardService

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


def build_dashboard(config_dir: Path = CONFIG_DIR) -> DashboardService:
    config_engine = ConfigEngine(config_dir)
    config_engine.load_all()
    return DashboardService(
        config_engine=config_engine,
        sheet_client=SheetClient(settings.SHEET_CSV_URL, timeout=settings.HTTP_TIMEOUT_SECONDS),
        price_feed=get_live_price_feed(settings.GOLD_QUOTE_GRAMS),
        gold_quote_grams=settings.GOLD_QUOTE_GRAMS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Initial load, then periodic live price refresh
    """
    # ===================
    # STARTUP
    # ===================
    logger.info("=" * 60)
    logger.info("🚀 Starting DCA Dashboard")
    logger.info("=" * 60)

    logger.info("⚙️  Step 1/3: Loading asset configuration...")
    dashboard = build_dashboard()
    app.state.dashboard = dashboard
    logger.info("✅ Configuration loaded")

    logger.info("📊 Step 2/3: Loading sheet and live prices...")
    status = await dashboard.load_initial()
    if dashboard.error:
        logger.error("❌ Initial load: %s (%s)", status.value, dashboard.error)
    else:
        logger.info("✅ Initial load: %s", status.value)
    if dashboard.live_price_error:
        logger.warning("⚠️ Live prices unavailable: %s", dashboard.live_price_error)

    logger.info("⏰ Step 3/3: Starting scheduler...")
    scheduler = None
    if settings.SCHEDULER_ENABLED:
        scheduler = PriceRefreshScheduler(
            dashboard,
            interval_seconds=settings.PRICE_REFRESH_SECONDS,
            timezone=settings.TIMEZONE,
        )
        scheduler.start()
    else:
        logger.info("⏰ Scheduler disabled")
    app.state.scheduler = scheduler

    logger.info("=" * 60)
    logger.info(f"   ✅ API Server: http://{settings.API_HOST}:{settings.API_PORT}")
    logger.info(f"   ✅ API Docs: http://{settings.API_HOST}:{settings.API_PORT}/docs")
    logger.info("=" * 60)

    yield

    # ===================
    # SHUTDOWN
    # ===================
    logger.info("🛑 Shutting down DCA Dashboard...")
    if scheduler:
        scheduler.stop()
    logger.info("👋 Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="DCA Journey Dashboard",
    description="Dollar-cost averaging history for BTC and gold, blended with live prices",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "DCA Journey Dashboard",
        "version": "1.0.0",
        "assets": ["BTC", "GOLD"],
        "docs": "/docs",
    }


# Import and include routers
from dca_dashboard.api.routes import dashboard, health  # noqa: E402

app.include_router(health.router, tags=["Health"])
app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("dca_dashboard.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
