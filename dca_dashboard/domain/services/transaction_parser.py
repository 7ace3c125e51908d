"""
TRANSACTION PARSER
Turn the published DCA sheet (CSV text) into purchase rows for one asset

RULES:
- Headers are matched by exact name; any missing one fails the whole asset
- Values are plain comma-split (the sheet export has no quoted cells)
- Bad rows are dropped, never reported: unparseable date, non-numeric
  amount, or invested <= 0
"""

import logging
import math
import re
from typing import List, Optional

from dca_dashboard.core.errors import EmptySheetError, MissingColumnsError
from dca_dashboard.domain.models import AssetColumns, AssetType, Transaction
from dca_dashboard.utils.time import parse_sheet_date

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r\n|\n")


def _parse_number(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _cell(values: List[str], index: int) -> Optional[str]:
    if index >= len(values):
        return None
    return values[index]


def parse_transactions(csv_text: str, asset: AssetType, columns: AssetColumns) -> List[Transaction]:
    """
    Parse every valid purchase row for an asset.

    Raises:
        EmptySheetError: fewer than two lines (header + one row)
        MissingColumnsError: any required header is absent

    Returns:
        Rows in sheet order; may be empty if every row was filtered out.
    """
    lines = _LINE_SPLIT.split(csv_text.strip())
    if len(lines) < 2:
        raise EmptySheetError()

    header = [h.strip() for h in lines[0].split(",")]
    expected = columns.as_list()
    missing = [name for name in expected if name not in header]
    if missing:
        raise MissingColumnsError(asset.value, missing, expected)

    date_idx = header.index(columns.date)
    invested_idx = header.index(columns.invested)
    price_idx = header.index(columns.price)
    purchased_idx = header.index(columns.purchased)

    transactions: List[Transaction] = []
    dropped = 0
    for line in lines[1:]:
        values = [v.strip() for v in line.split(",")]

        tx_date = parse_sheet_date(_cell(values, date_idx))
        invested = _parse_number(_cell(values, invested_idx))
        price = _parse_number(_cell(values, price_idx))
        purchased = _parse_number(_cell(values, purchased_idx))

        if tx_date is None or invested is None or price is None or purchased is None:
            dropped += 1
            continue
        if invested <= 0:
            dropped += 1
            continue

        transactions.append(
            Transaction(
                date=tx_date,
                invested=invested,
                asset_price=price,
                asset_purchased=purchased,
            )
        )

    logger.debug(
        "Parsed %s sheet: %d rows kept, %d dropped",
        asset.value,
        len(transactions),
        dropped,
    )
    return transactions
