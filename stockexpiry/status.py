"""Per-item summary figures and the filters used by the report screen."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Batch, ExpiryStatus, ItemExpiry, UnknownFilterError

ALERT_STATUSES = frozenset({ExpiryStatus.EXPIRED, ExpiryStatus.NEAR})

FILTER_CATEGORIES = ("all", "alerts", "expired", "near", "safe", "unknown")


def summarize(
    batches: Sequence[Batch],
) -> Tuple[ExpiryStatus, Optional[str], Optional[int], float]:
    """Return ``(overall_status, nearest_date, nearest_days, total_expiring)``.

    ``batches`` must already be in urgency order.  The first dated batch
    decides the overall status; undated batches never do.
    """

    dated = [b for b in batches if b.expiry_date is not None]
    if not dated:
        return ExpiryStatus.UNKNOWN, None, None, 0.0
    worst = dated[0]
    expiring = sum(b.quantity for b in dated if b.status in ALERT_STATUSES)
    return worst.status, worst.expiry_text, worst.days_left, expiring


def _category_statuses(category: str) -> Optional[frozenset]:
    if category not in FILTER_CATEGORIES:
        raise UnknownFilterError(f"Unknown filter category: {category!r}")
    if category == "all":
        return None
    if category == "alerts":
        return ALERT_STATUSES
    return frozenset({ExpiryStatus(category)})


def _nearest_key(line: ItemExpiry) -> Tuple[int, int]:
    if line.nearest_days is None:
        return (1, 0)
    return (0, line.nearest_days)


def _matches_search(line: ItemExpiry, search: str) -> bool:
    if not search:
        return True
    needle = search.strip()
    return needle.lower() in line.item.name.lower() or needle in line.item.code


def filter_items(
    lines: Iterable[ItemExpiry], category: str = "all", search: str = ""
) -> List[ItemExpiry]:
    """Items whose overall status falls in ``category``, most urgent first.

    ``search`` matches case-insensitively against the item name, or as a
    substring of the item code.
    """

    statuses = _category_statuses(category)
    selected = [
        line
        for line in lines
        if _matches_search(line, search)
        and (statuses is None or line.overall_status in statuses)
    ]
    return sorted(selected, key=_nearest_key)


def count_by_status(lines: Iterable[ItemExpiry]) -> Dict[str, int]:
    counts = {category: 0 for category in FILTER_CATEGORIES if category != "all"}
    total = 0
    for line in lines:
        total += 1
        counts[line.overall_status.value] += 1
        if line.overall_status in ALERT_STATUSES:
            counts["alerts"] += 1
    counts["total"] = total
    return counts


def export_rows(
    lines: Iterable[ItemExpiry], category: str = "all", search: str = ""
) -> List[Dict[str, Any]]:
    """Flatten the filtered report into one row per batch.

    For the status categories only batches of that status are listed; ``all``
    and ``unknown`` list every batch.  Under ``all`` an item without any batch
    still gets a single row so the export covers the whole inventory.
    """

    statuses = _category_statuses(category)
    batch_statuses = None if category == "unknown" else statuses
    rows: List[Dict[str, Any]] = []
    for line in filter_items(lines, category, search):
        item = line.item
        shown = [
            b
            for b in line.batches
            if batch_statuses is None or b.status in batch_statuses
        ]
        for batch in shown:
            rows.append(
                {
                    "code": item.code,
                    "name": item.name,
                    "actual_stock": item.actual_stock,
                    "expiry": batch.expiry_text,
                    "quantity": batch.quantity,
                    "status": batch.status.value,
                    "days_left": batch.days_left,
                    "source": batch.source,
                }
            )
        if not line.batches and category == "all":
            rows.append(
                {
                    "code": item.code,
                    "name": item.name,
                    "actual_stock": item.actual_stock,
                    "expiry": None,
                    "quantity": item.actual_stock,
                    "status": ExpiryStatus.UNKNOWN.value,
                    "days_left": None,
                    "source": None,
                }
            )
    return rows


__all__ = [
    "ALERT_STATUSES",
    "FILTER_CATEGORIES",
    "count_by_status",
    "export_rows",
    "filter_items",
    "summarize",
]
