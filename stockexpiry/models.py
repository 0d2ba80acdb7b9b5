"""Records consumed and produced by the expiry report.

Input records mirror what the back-office screens keep in memory (inventory
items, purchase invoices, sales invoices).  They are read-only to this
package.  :class:`Batch` and :class:`ItemExpiry` are derived on every report
computation and never persisted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

# days_left value exported for batches without a usable expiry date
UNKNOWN_DAYS = 9999


class ExpiryStatus(str, Enum):
    EXPIRED = "expired"
    NEAR = "near"
    SAFE = "safe"
    UNKNOWN = "unknown"


class SourceType(str, Enum):
    STOCKTAKE = "stocktake"
    INVOICE = "invoice"


class ReportError(Exception):
    """Base error class for expiry report issues."""


class UnknownFilterError(ReportError, ValueError):
    """Raised when a caller asks for a filter category that does not exist."""


_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _normalise_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {_snake(str(k)): v for k, v in data.items()}


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


@dataclass(frozen=True)
class InventoryItem:
    """An inventory item as kept by the stock screens."""

    id: str
    code: str = ""
    name: str = ""
    actual_stock: float = 0.0
    stocktake_expiry: str = ""
    has_sub_units: bool = False
    factor: float = 1.0
    major_unit: str = ""
    minor_unit: str = ""
    # caller fields this package does not interpret, echoed back in output
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    _FIELDS = (
        "id",
        "code",
        "name",
        "actual_stock",
        "stocktake_expiry",
        "has_sub_units",
        "factor",
        "major_unit",
        "minor_unit",
    )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InventoryItem":
        """Build an item from a camelCase (or snake_case) mapping.

        Unrecognised keys are kept in :attr:`extra` under their original name.
        """

        known = {}
        extra = {}
        for key, value in data.items():
            snake = _snake(str(key))
            if snake in cls._FIELDS:
                known[snake] = value
            else:
                extra[key] = value
        return cls(
            id=_as_str(known.get("id")),
            code=_as_str(known.get("code")),
            name=_as_str(known.get("name")),
            actual_stock=_as_float(known.get("actual_stock")),
            stocktake_expiry=_as_str(known.get("stocktake_expiry")),
            has_sub_units=_as_bool(known.get("has_sub_units")),
            factor=_as_float(known.get("factor", 1)) or 1.0,
            major_unit=_as_str(known.get("major_unit")),
            minor_unit=_as_str(known.get("minor_unit")),
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update(
            {
                "id": self.id,
                "code": self.code,
                "name": self.name,
                "actualStock": self.actual_stock,
                "stocktakeExpiry": self.stocktake_expiry or None,
                "hasSubUnits": self.has_sub_units,
                "factor": self.factor,
                "majorUnit": self.major_unit,
                "minorUnit": self.minor_unit,
            }
        )
        return data


@dataclass(frozen=True)
class PurchaseRow:
    """A received line on a purchase invoice."""

    id: str
    item_id: str = ""
    barcode: str = ""
    qty: float = 0.0
    expiry: str = ""
    unit: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PurchaseRow":
        d = _normalise_keys(data)
        return cls(
            id=_as_str(d.get("id")),
            item_id=_as_str(d.get("item_id")),
            barcode=_as_str(d.get("barcode")),
            qty=_as_float(d.get("qty")),
            expiry=_as_str(d.get("expiry")),
            unit=_as_str(d.get("unit")),
        )


@dataclass(frozen=True)
class PurchaseInvoice:
    """A purchase invoice and its received rows."""

    id: str
    status: str = ""
    vendor: str = ""
    rows: Tuple[PurchaseRow, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PurchaseInvoice":
        d = _normalise_keys(data)
        return cls(
            id=_as_str(d.get("id")),
            status=_as_str(d.get("status")),
            vendor=_as_str(d.get("vendor")),
            rows=tuple(PurchaseRow.from_dict(r) for r in d.get("rows") or ()),
        )


@dataclass(frozen=True)
class SalesRow:
    """A sold line on a sales or returns invoice."""

    code: str = ""
    item_id: str = ""
    qty: float = 0.0
    unit: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SalesRow":
        d = _normalise_keys(data)
        return cls(
            code=_as_str(d.get("code")),
            item_id=_as_str(d.get("item_id")),
            qty=_as_float(d.get("qty")),
            unit=_as_str(d.get("unit")),
        )


@dataclass(frozen=True)
class SalesInvoice:
    """A sales invoice; returned invoices give stock back."""

    id: str
    status: str = ""
    rows: Tuple[SalesRow, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SalesInvoice":
        d = _normalise_keys(data)
        return cls(
            id=_as_str(d.get("id")),
            status=_as_str(d.get("status")),
            rows=tuple(SalesRow.from_dict(r) for r in d.get("rows") or ()),
        )


@dataclass(frozen=True)
class Batch:
    """One dated lot of stock for a single item."""

    id: str
    source: str
    source_type: SourceType
    expiry_text: str
    expiry_date: Optional[date]
    quantity: float
    original_quantity: float
    days_left: Optional[int]
    status: ExpiryStatus

    @property
    def sort_key(self) -> Tuple[int, int]:
        # undated batches order after every real date
        if self.days_left is None:
            return (1, 0)
        return (0, self.days_left)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "sourceType": self.source_type.value,
            "expiryText": self.expiry_text,
            "expiryDate": self.expiry_date.isoformat() if self.expiry_date else None,
            "quantity": self.quantity,
            "originalQuantity": self.original_quantity,
            "daysLeft": UNKNOWN_DAYS if self.days_left is None else self.days_left,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class ItemExpiry:
    """Report line for one inventory item."""

    item: InventoryItem
    batches: Tuple[Batch, ...]
    overall_status: ExpiryStatus
    nearest_date: Optional[str]
    nearest_days: Optional[int]
    total_expiring: float

    def to_dict(self) -> Dict[str, Any]:
        data = self.item.to_dict()
        data.update(
            {
                "batches": [b.to_dict() for b in self.batches],
                "overallStatus": self.overall_status.value,
                "nearestDate": self.nearest_date,
                "nearestDays": (
                    UNKNOWN_DAYS if self.nearest_days is None else self.nearest_days
                ),
                "totalExpiring": self.total_expiring,
            }
        )
        return data


__all__ = [
    "Batch",
    "ExpiryStatus",
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
]
