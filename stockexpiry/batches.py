"""Construction of dated batches for an inventory item.

Batches come from two places: the expiry recorded at the last stocktake
(covering everything physically on hand) and the expiry dates typed into
purchase invoice rows.  Invoice rows are linked to items either by item id or,
for older data, by barcode, so the purchase history is indexed under both keys
separately and the two lookups are merged per item.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from .config import settings
from .dates import classify, days_left, parse_expiry
from .models import Batch, InventoryItem, PurchaseInvoice, SourceType

logger = logging.getLogger(__name__)


def make_batch(
    batch_id: str,
    source: str,
    source_type: SourceType,
    expiry_text: str,
    quantity: float,
    *,
    today: date,
    threshold: int,
) -> Batch:
    expiry = parse_expiry(expiry_text)
    days = days_left(expiry, today)
    return Batch(
        id=batch_id,
        source=source,
        source_type=source_type,
        expiry_text=expiry_text,
        expiry_date=expiry,
        quantity=quantity,
        original_quantity=quantity,
        days_left=days,
        status=classify(days, threshold),
    )


class PurchaseIndex:
    """Purchase invoice batches keyed by item id and by barcode."""

    def __init__(self) -> None:
        self.by_item_id: Dict[str, List[Batch]] = defaultdict(list)
        self.by_barcode: Dict[str, List[Batch]] = defaultdict(list)

    @classmethod
    def build(
        cls,
        invoices: Iterable[PurchaseInvoice],
        *,
        today: date,
        threshold: int,
        deleted_status: Optional[str] = None,
        source_template: Optional[str] = None,
    ) -> "PurchaseIndex":
        """Index every dated row of every non-deleted purchase invoice."""

        deleted_status = deleted_status or settings.DELETED_STATUS
        source_template = source_template or settings.INVOICE_SOURCE_TEMPLATE
        index = cls()
        for invoice in invoices:
            if invoice.status == deleted_status:
                logger.debug("Skipping deleted purchase invoice %s", invoice.id)
                continue
            source = source_template.format(
                invoice_id=invoice.id, vendor=invoice.vendor
            )
            for row in invoice.rows:
                if not row.expiry:
                    continue
                batch = make_batch(
                    f"INV-{invoice.id}-{row.id}",
                    source,
                    SourceType.INVOICE,
                    row.expiry,
                    row.qty,
                    today=today,
                    threshold=threshold,
                )
                index.add(batch, item_id=row.item_id, barcode=row.barcode)
        return index

    def add(self, batch: Batch, *, item_id: str = "", barcode: str = "") -> None:
        if item_id:
            self.by_item_id[item_id].append(batch)
        if barcode:
            self.by_barcode[barcode].append(batch)

    def lookup(self, item: InventoryItem) -> List[Batch]:
        """Batches filed under the item's id followed by those under its code."""

        found: List[Batch] = []
        if item.id:
            found.extend(self.by_item_id.get(item.id, ()))
        if item.code:
            found.extend(self.by_barcode.get(item.code, ()))
        return found


def stocktake_batch(
    item: InventoryItem,
    *,
    today: date,
    threshold: int,
    label: Optional[str] = None,
) -> Optional[Batch]:
    """The batch standing for the item's counted stock, if an expiry was recorded."""

    if not item.stocktake_expiry:
        return None
    return make_batch(
        f"ST-{item.id}",
        label or settings.STOCKTAKE_SOURCE_LABEL,
        SourceType.STOCKTAKE,
        item.stocktake_expiry,
        item.actual_stock,
        today=today,
        threshold=threshold,
    )


def item_batches(
    item: InventoryItem,
    index: PurchaseIndex,
    *,
    today: date,
    threshold: int,
    stocktake_label: Optional[str] = None,
) -> List[Batch]:
    """All candidate batches for ``item``, deduplicated by batch id.

    Order is stocktake first, then invoice history; a repeated id keeps its
    first position but takes the later batch.
    """

    unique: Dict[str, Batch] = {}
    st = stocktake_batch(
        item, today=today, threshold=threshold, label=stocktake_label
    )
    if st is not None:
        unique[st.id] = st
    for batch in index.lookup(item):
        unique[batch.id] = batch
    return list(unique.values())


__all__ = ["PurchaseIndex", "item_batches", "make_batch", "stocktake_batch"]
