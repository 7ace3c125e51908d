"""
Currency conversion between THB (base) and USD (display).

The THB/USD rate is the ratio of BTC's price in each currency, taken from
the same live batch. It tracks the real rate closely enough for a dashboard
but is not a foreign-exchange quote.
"""

from typing import Optional

from dca_dashboard.core.errors import CurrencyUnavailableError, LivePriceError
from dca_dashboard.domain.models import BASE_CURRENCY, Currency


def derive_fx_rate(btc_base_price: float, btc_alt_price: float) -> float:
    """THB per USD."""
    if not btc_alt_price or btc_alt_price <= 0:
        raise LivePriceError("BTC price in USD is zero or invalid.")
    return btc_base_price / btc_alt_price


def conversion_rate(currency: Currency, fx_rate: Optional[float]) -> float:
    """Multiplier from base-currency amounts to `currency` amounts."""
    if currency == BASE_CURRENCY:
        return 1.0
    if not fx_rate:
        raise CurrencyUnavailableError(
            f"No exchange rate available for {currency.value}; live prices have not loaded yet."
        )
    return 1.0 / fx_rate


def convert(value: float, rate: float) -> float:
    return value * rate
