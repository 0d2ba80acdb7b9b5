"""
Unit conversion for sold quantities.

Batch quantities are kept in the item's major unit (the unit stock is counted
and purchased in). Sales rows may be entered in the minor unit, e.g. a single
strip from a box of ten; those are scaled down by the item's factor.
"""
from __future__ import annotations

from .models import InventoryItem


def is_minor_unit(item: InventoryItem, unit: str) -> bool:
    """
    True if a row in ``unit`` has to be divided by the item's factor.

    Only items with sub-units and a factor above 1 have a minor unit. Any unit
    other than the major unit counts as minor, so rows saved with a blank or
    renamed unit label still convert.
    """
    if not item.has_sub_units or item.factor <= 1:
        return False
    return (unit or "").strip().lower() != (item.major_unit or "").strip().lower()


def to_major_units(item: InventoryItem, qty: float, unit: str) -> float:
    """Return ``qty`` expressed in the item's major unit."""
    if is_minor_unit(item, unit):
        return qty / item.factor
    return qty
