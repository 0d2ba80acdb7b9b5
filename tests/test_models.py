from datetime import date

from stockexpiry import (
    Batch,
    ExpiryStatus,
    InventoryItem,
    PurchaseInvoice,
    SalesInvoice,
    SourceType,
    UNKNOWN_DAYS,
)


def test_inventory_item_from_camel_case_keeps_extra_fields():
    item = InventoryItem.from_dict(
        {
            "id": 7,
            "code": "6221",
            "name": "Panadol",
            "category": "pharmacy",
            "actualStock": "12",
            "stocktakeExpiry": "06/2025",
            "hasSubUnits": True,
            "factor": 3,
            "majorUnit": "box",
            "minorUnit": "strip",
        }
    )
    assert item.id == "7"
    assert item.actual_stock == 12.0
    assert item.has_sub_units is True
    assert item.factor == 3
    assert item.extra == {"category": "pharmacy"}

    data = item.to_dict()
    assert data["category"] == "pharmacy"
    assert data["actualStock"] == 12.0
    assert data["stocktakeExpiry"] == "06/2025"


def test_bad_numbers_coerce_to_zero():
    item = InventoryItem.from_dict({"id": "1", "actualStock": "lots", "factor": None})
    assert item.actual_stock == 0.0
    assert item.factor == 1.0


def test_invoices_from_dict_tolerate_missing_rows():
    assert PurchaseInvoice.from_dict({"id": "P1", "status": "محول"}).rows == ()
    sale = SalesInvoice.from_dict({"id": "S1", "rows": None})
    assert sale.rows == ()


def test_undated_batch_exports_sentinel_days():
    batch = Batch(
        id="ST-1",
        source="stock",
        source_type=SourceType.STOCKTAKE,
        expiry_text="soon",
        expiry_date=None,
        quantity=4,
        original_quantity=4,
        days_left=None,
        status=ExpiryStatus.UNKNOWN,
    )
    data = batch.to_dict()
    assert data["daysLeft"] == UNKNOWN_DAYS
    assert data["expiryDate"] is None
    assert data["sourceType"] == "stocktake"
    assert data["status"] == "unknown"


def test_batch_sort_key_orders_undated_last():
    dated = Batch("A", "s", SourceType.INVOICE, "x", date(2024, 1, 1), 1, 1, 10000, ExpiryStatus.SAFE)
    undated = Batch("B", "s", SourceType.INVOICE, "y", None, 1, 1, None, ExpiryStatus.UNKNOWN)
    assert sorted([undated, dated], key=lambda b: b.sort_key) == [dated, undated]
