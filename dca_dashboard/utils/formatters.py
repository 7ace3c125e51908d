"""
Display formatting for dashboard values.
"""

from datetime import datetime


def format_currency(value: float, currency: str = "THB") -> str:
    """1234.5 -> '1,234.50 THB'"""
    return f"{value:,.2f} {currency}"


def format_compact_number(value: float) -> str:
    """Axis ticks: 12500 -> '12K', values below 1000 unchanged."""
    if value >= 1000:
        return f"{value / 1000:.0f}K"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_date(value: datetime) -> str:
    """'05 Jan 2024'"""
    return value.strftime("%d %b %Y")


def format_full_date(value: datetime) -> str:
    """'01/05/2024 09:30:00 AM'"""
    return value.strftime("%m/%d/%Y %I:%M:%S %p")


def format_time(value: datetime) -> str:
    return value.strftime("%I:%M:%S %p")


def format_percentage(value: float) -> str:
    return f"{value:.2f}%"


def format_signed_currency(value: float, currency: str = "THB") -> str:
    sign = "+" if value >= 0 else "-"
    return f"{sign}{format_currency(abs(value), currency)}"


def format_amount(value: float, unit: str = "") -> str:
    """Units held, 8 decimals."""
    text = f"{value:.8f}"
    return f"{text} {unit}" if unit else text
