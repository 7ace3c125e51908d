"""
Dashboard error types.

Structural errors (bad or unreachable sheet) block an asset's chart.
Live price errors only disable blending for the current refresh cycle.
"""

from typing import Iterable


class DashboardError(Exception):
    """Base class for dashboard failures"""


class DataSourceError(DashboardError):
    """Sheet could not be fetched or understood"""


class ConfigurationError(DataSourceError):
    pass


class EmptySheetError(DataSourceError):
    def __init__(self, message: str = "CSV file is empty or has only a header."):
        super().__init__(message)


class MissingColumnsError(DataSourceError):
    def __init__(self, asset: str, missing: Iterable[str], expected: Iterable[str]):
        self.asset = asset
        self.missing = list(missing)
        self.expected = list(expected)
        super().__init__(
            f"Columns for {asset} not found in the Google Sheet "
            f"(missing: {', '.join(self.missing)}). "
            f"Please ensure the following headers are present and correct in the published CSV: "
            f"{', '.join(self.expected)}. "
            f"Empty columns between BTC and Gold data may cause this issue."
        )


class AggregationError(DashboardError):
    pass


class LivePriceError(DashboardError):
    """Live price batch failed; no partial snapshot is produced"""


class CurrencyUnavailableError(DashboardError):
    pass


class DashboardUnavailableError(DashboardError):
    """Initial load has not finished or has failed"""
