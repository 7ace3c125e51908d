from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Service, dashboard and scheduler status"""
    dashboard = getattr(request.app.state, "dashboard", None)
    scheduler = getattr(request.app.state, "scheduler", None)

    scheduler_status = "disabled"
    if scheduler is not None:
        scheduler_status = "running" if scheduler.running else "stopped"

    return {
        "status": "healthy",
        "service": "DCA Dashboard",
        "version": "1.0.0",
        "dashboard": dashboard.get_status() if dashboard else None,
        "services": {
            "api": "running",
            "scheduler": scheduler_status,
        },
    }
