"""Time utilities (sheet dates and local clock)."""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from dca_dashboard.config import settings

LOCAL_TZ = ZoneInfo(settings.TIMEZONE)

# Formats accepted for the sheet's date column, tried in order.
SHEET_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%d %b %Y",
    "%b %d %Y",
    "%b %d %Y %H:%M:%S",
    "%B %d %Y",
    "%d %B %Y",
)


def now_local() -> datetime:
    """Current time in the dashboard timezone (aware)."""
    return datetime.now(LOCAL_TZ)


def parse_sheet_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a date cell from the sheet.

    Returns None for blanks and anything that does not match a known format.
    """
    if not value:
        return None
    text = value.strip()
    if not text:
        return None
    for fmt in SHEET_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
