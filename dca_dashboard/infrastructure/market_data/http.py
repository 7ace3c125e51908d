"""
Shared JSON GET for the price APIs.

No retries and no caching: a failed call fails the current refresh.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from dca_dashboard.core.errors import LivePriceError

logger = logging.getLogger(__name__)


async def request_json(
    url: str,
    label: str,
    params: Optional[dict] = None,
    timeout: float = 30.0,
) -> Any:
    headers = {"Accept": "application/json"}
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url, headers=headers, params=params)
    except httpx.HTTPError as exc:
        logger.debug("%s request failed: %s", label, exc)
        raise LivePriceError(f"{label} request failed: {exc}") from exc

    if response.status_code != 200:
        logger.debug("%s returned %s: %s", label, response.status_code, response.text)
        raise LivePriceError(f"{label} failed: {response.status_code}")

    try:
        return response.json()
    except ValueError as exc:
        raise LivePriceError(f"{label} returned invalid JSON") from exc


def require_number(payload: dict, key: str, label: str) -> float:
    """Pull a numeric field or fail the batch."""
    value = payload.get(key) if isinstance(payload, dict) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LivePriceError(f"Invalid data from {label}: '{key}' missing")
    return float(value)
