from __future__ import annotations

from datetime import datetime


def remaining_stock(*, quantity: int, sold: int) -> int:
    return quantity - sold


def is_within_availability(
    *,
    available_from: datetime | None,
    available_until: datetime | None,
    now_utc: datetime,
) -> bool:
    """Open-ended bounds (None) do not restrict the window."""
    if available_from is not None and now_utc < available_from:
        return False
    if available_until is not None and now_utc > available_until:
        return False
    return True
