"""FIFO depletion of dated batches by sold quantity.

The counted stock of an item says how much is on hand but not which dated
lots it belongs to.  Sales are therefore replayed against the batches, soonest
expiry first, skipping expired batches (expired stock is not sold).  What is
left in each batch is the quantity still on hand for that expiry date.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from .config import settings
from .models import Batch, ExpiryStatus, InventoryItem, SalesInvoice, SalesRow
from .units import to_major_units

logger = logging.getLogger(__name__)


def _signed_rows(
    invoices: Iterable[SalesInvoice],
    deleted_status: str,
    returned_status: str,
) -> Iterable[Tuple[SalesRow, int]]:
    for invoice in invoices:
        if invoice.status == deleted_status:
            continue
        sign = -1 if invoice.status == returned_status else 1
        for row in invoice.rows:
            yield row, sign


def total_sold(
    item: InventoryItem,
    invoices: Iterable[SalesInvoice],
    *,
    deleted_status: Optional[str] = None,
    returned_status: Optional[str] = None,
) -> float:
    """Net quantity of ``item`` sold, in its major unit.

    Rows match on item id or on code.  Returned invoices count negatively.
    """

    deleted_status = deleted_status or settings.DELETED_STATUS
    returned_status = returned_status or settings.RETURNED_STATUS
    sold = 0.0
    for row, sign in _signed_rows(invoices, deleted_status, returned_status):
        if (item.id and row.item_id == item.id) or (item.code and row.code == item.code):
            sold += sign * to_major_units(item, row.qty, row.unit)
    return sold


class SalesIndex:
    """Sales rows of all invoices grouped by item id and by code.

    Lets a full report compute every item's sold quantity without rescanning
    the sales data per item.  Unit conversion is deferred until the item is
    known.
    """

    def __init__(self) -> None:
        # entries are (serial, row, sign); the serial identifies one occurrence
        self._by_item_id: Dict[str, List[Tuple[int, SalesRow, int]]] = defaultdict(list)
        self._by_code: Dict[str, List[Tuple[int, SalesRow, int]]] = defaultdict(list)

    @classmethod
    def build(
        cls,
        invoices: Iterable[SalesInvoice],
        *,
        deleted_status: Optional[str] = None,
        returned_status: Optional[str] = None,
    ) -> "SalesIndex":
        index = cls()
        signed = _signed_rows(
            invoices,
            deleted_status or settings.DELETED_STATUS,
            returned_status or settings.RETURNED_STATUS,
        )
        for serial, (row, sign) in enumerate(signed):
            entry = (serial, row, sign)
            if row.item_id:
                index._by_item_id[row.item_id].append(entry)
            if row.code:
                index._by_code[row.code].append(entry)
        return index

    def total_sold(self, item: InventoryItem) -> float:
        """Same result as :func:`total_sold` for this item."""

        seen = set()
        sold = 0.0
        candidates = []
        if item.id:
            candidates.extend(self._by_item_id.get(item.id, ()))
        if item.code:
            candidates.extend(self._by_code.get(item.code, ()))
        for serial, row, sign in candidates:
            # a row filed under both keys is counted once
            if serial in seen:
                continue
            seen.add(serial)
            sold += sign * to_major_units(item, row.qty, row.unit)
        return sold


def order_batches(batches: Iterable[Batch]) -> List[Batch]:
    """Most urgent first; batches without a date go last."""

    return sorted(batches, key=lambda b: b.sort_key)


def deplete(
    batches: Iterable[Batch],
    sold: float,
    *,
    epsilon: Optional[float] = None,
) -> List[Batch]:
    """Deduct ``sold`` from the batches oldest-first.

    Returns the batches still holding stock, in urgency order.  The input
    batches are not modified.  Expired batches are passed through untouched,
    batches left with ``epsilon`` or less are dropped, and selling more than
    is available simply empties every non-expired batch.
    """

    if epsilon is None:
        epsilon = settings.DEPLETION_EPSILON
    remaining = sold
    result: List[Batch] = []
    for batch in order_batches(batches):
        if batch.status is not ExpiryStatus.EXPIRED and remaining > 0:
            take = min(max(batch.quantity, 0.0), remaining)
            remaining -= take
            batch = replace(batch, quantity=batch.quantity - take)
        if batch.quantity > epsilon:
            result.append(batch)
    if remaining > epsilon:
        logger.debug("%.3f sold units not covered by any batch", remaining)
    return result


__all__ = ["SalesIndex", "deplete", "order_batches", "total_sold"]
