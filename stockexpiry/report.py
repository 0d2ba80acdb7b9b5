"""Expiry report over an inventory snapshot.

:class:`ExpiryReport` ties the pieces together: purchase history is indexed
once, each item gets its stocktake and invoice batches, sold quantity is
replayed against them FIFO and the surviving batches are summarised.

The whole computation is a pure function of the three input collections, the
alert threshold and ``today``.  Changing the threshold only relabels batches
(see :meth:`ExpiryReport.relabel`); depletion never depends on it because only
expired batches are exempt from sales and "expired" does not involve the
threshold.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from .batches import PurchaseIndex, item_batches
from .config import settings
from .dates import classify
from .fifo import SalesIndex, deplete
from .models import (
    Batch,
    InventoryItem,
    ItemExpiry,
    PurchaseInvoice,
    SalesInvoice,
)
from .status import count_by_status, export_rows, filter_items, summarize

logger = logging.getLogger(__name__)


def _check_threshold(threshold: Optional[int]) -> int:
    if threshold is None:
        return settings.ALERT_THRESHOLD_DAYS
    if threshold < 0:
        raise ValueError("Alert threshold must not be negative")
    return int(threshold)


def _line(item: InventoryItem, batches: Sequence[Batch]) -> ItemExpiry:
    overall, nearest_date, nearest_days, expiring = summarize(batches)
    return ItemExpiry(
        item=item,
        batches=tuple(batches),
        overall_status=overall,
        nearest_date=nearest_date,
        nearest_days=nearest_days,
        total_expiring=expiring,
    )


class ExpiryReport:
    """Depletion-adjusted expiry batches for every inventory item."""

    def __init__(
        self,
        inventory: Iterable[InventoryItem],
        purchase_invoices: Iterable[PurchaseInvoice],
        sales_invoices: Iterable[SalesInvoice] = (),
        *,
        alert_threshold_days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> None:
        self.threshold = _check_threshold(alert_threshold_days)
        self.today = today or date.today()

        purchases = PurchaseIndex.build(
            purchase_invoices, today=self.today, threshold=self.threshold
        )
        sales = SalesIndex.build(sales_invoices)

        lines: List[ItemExpiry] = []
        for item in inventory:
            candidates = item_batches(
                item, purchases, today=self.today, threshold=self.threshold
            )
            remaining = deplete(candidates, sales.total_sold(item))
            lines.append(_line(item, remaining))
        self._lines = lines

        logger.info(
            "Expiry report for %s: %d items, %d batches, %d alerts",
            self.today.isoformat(),
            len(lines),
            sum(len(line.batches) for line in lines),
            self.counts()["alerts"],
        )

    @classmethod
    def from_records(
        cls,
        inventory: Iterable[Mapping[str, Any]],
        purchase_invoices: Iterable[Mapping[str, Any]],
        sales_invoices: Iterable[Mapping[str, Any]] = (),
        **kwargs: Any,
    ) -> "ExpiryReport":
        """Build a report from the camelCase records kept by the screens."""

        return cls(
            [InventoryItem.from_dict(r) for r in inventory],
            [PurchaseInvoice.from_dict(r) for r in purchase_invoices],
            [SalesInvoice.from_dict(r) for r in sales_invoices],
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Results
    @property
    def lines(self) -> List[ItemExpiry]:
        return list(self._lines)

    def __iter__(self) -> Iterator[ItemExpiry]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def relabel(self, alert_threshold_days: int) -> "ExpiryReport":
        """Return a copy of this report classified with another threshold.

        Batch quantities are reused as they are; only statuses and summaries
        are recomputed.
        """

        threshold = _check_threshold(alert_threshold_days)
        clone = object.__new__(type(self))
        clone.threshold = threshold
        clone.today = self.today
        clone._lines = [
            _line(
                line.item,
                [
                    replace(b, status=classify(b.days_left, threshold))
                    for b in line.batches
                ],
            )
            for line in self._lines
        ]
        return clone

    # ------------------------------------------------------------------
    # Reporting helpers
    def filter(self, category: str = "all", search: str = "") -> List[ItemExpiry]:
        return filter_items(self._lines, category, search)

    def counts(self) -> Dict[str, int]:
        return count_by_status(self._lines)

    def export_rows(self, category: str = "all", search: str = "") -> List[Dict[str, Any]]:
        return export_rows(self._lines, category, search)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [line.to_dict() for line in self._lines]


def build_report(
    inventory: Iterable[InventoryItem],
    purchase_invoices: Iterable[PurchaseInvoice],
    sales_invoices: Iterable[SalesInvoice] = (),
    alert_threshold_days: Optional[int] = None,
    today: Optional[date] = None,
) -> List[ItemExpiry]:
    """Compute the expiry report lines for ``inventory``, in inventory order."""

    report = ExpiryReport(
        inventory,
        purchase_invoices,
        sales_invoices,
        alert_threshold_days=alert_threshold_days,
        today=today,
    )
    return report.lines


__all__ = ["ExpiryReport", "build_report"]
