"""Piece-rate earnings aggregation."""

from __future__ import annotations

from collections.abc import Iterable

from paye.calculators.types import PieceRateItem


def aggregate(items: Iterable[PieceRateItem]) -> float:
    """Sum rate * quantity over the items; 0.0 for no items."""
    total = 0.0
    for item in items:
        total += item.rate * item.quantity
    return total
