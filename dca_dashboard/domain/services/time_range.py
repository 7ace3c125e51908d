from typing import List, TypeVar

from dca_dashboard.domain.models import TimeRange

T = TypeVar("T")

RANGE_RECORDS = {
    TimeRange.W: 7,
    TimeRange.M: 30,
}


def slice_for_range(items: List[T], time_range: TimeRange) -> List[T]:
    """Keep the last 7 (W) or 30 (M) records; Y keeps everything."""
    limit = RANGE_RECORDS.get(time_range)
    if limit is None:
        return list(items)
    return list(items[-limit:])
