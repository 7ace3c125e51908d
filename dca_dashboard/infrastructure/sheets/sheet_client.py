"""
Google Sheets client
Downloads the published DCA sheet as CSV text.
"""

from __future__ import annotations

import logging

import httpx

from dca_dashboard.core.errors import ConfigurationError, DataSourceError

logger = logging.getLogger(__name__)

PLACEHOLDER_MARKER = "YOUR_SHEET_ID_HERE"


class SheetClient:
    def __init__(self, csv_url: str, timeout: float = 30.0):
        self.csv_url = csv_url
        self.timeout = timeout

    async def fetch_csv(self) -> str:
        if not self.csv_url or PLACEHOLDER_MARKER in self.csv_url:
            raise ConfigurationError("Please set SHEET_CSV_URL to the published CSV link of your sheet")

        logger.info("📄 Fetching DCA sheet")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(self.csv_url)
        except httpx.HTTPError as exc:
            raise DataSourceError(f"Failed to fetch from Google Sheets: {exc}") from exc

        if response.status_code != 200:
            raise DataSourceError(f"Failed to fetch from Google Sheets: {response.status_code}")

        return response.text
