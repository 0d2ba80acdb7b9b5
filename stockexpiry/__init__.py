"""Expiry-aware batch tracking for the back-office inventory.

Given inventory items, purchase invoices and sales invoices this package works
out, per item, which dated lots of stock are still on hand:

* purchase rows and the last stocktake each contribute a dated batch;
* sold quantity is deducted first-in first-out, soonest expiry first;
* expired batches are never sold from;
* every batch and every item gets an expired / near / safe / unknown status.

Nothing here raises for bad data.  Unreadable dates and unmatched rows degrade
to ``unknown`` or are ignored so one bad record cannot blank out the report.
"""

from .models import (
    Batch,
    ExpiryStatus,
    InventoryItem,
    ItemExpiry,
    PurchaseInvoice,
    PurchaseRow,
    ReportError,
    SalesInvoice,
    SalesRow,
    SourceType,
    UNKNOWN_DAYS,
    UnknownFilterError,
)
from .dates import classify, days_left, parse_expiry
from .report import ExpiryReport, build_report
from .status import FILTER_CATEGORIES

__all__ = [
    "Batch",
    "ExpiryReport",
    "ExpiryStatus",
    "FILTER_CATEGORIES",
    "InventoryItem",
    "ItemExpiry",
    "PurchaseInvoice",
    "PurchaseRow",
    "ReportError",
    "SalesInvoice",
    "SalesRow",
    "SourceType",
    "UNKNOWN_DAYS",
    "UnknownFilterError",
    "build_report",
    "classify",
    "days_left",
    "parse_expiry",
]
