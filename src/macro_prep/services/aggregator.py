"""Macro aggregation over composition sessions."""

import math

from macro_prep.domain.catalog import MeasureKind
from macro_prep.domain.composition import (
    CompositionEntry,
    CompositionSession,
    MacroTotals,
)

ZERO_TOTALS = MacroTotals(0.0, 0.0, 0.0, 0.0, 0.0)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)


def aggregate(session: CompositionSession) -> MacroTotals:
    """Sum every entry's contribution into session totals."""
    total = ZERO_TOTALS
    for entry in session.entries:
        part = entry_contribution(entry)
        total = MacroTotals(
            total_mass=total.total_mass + part.total_mass,
            calories=total.calories + part.calories,
            protein=total.protein + part.protein,
            carbs=total.carbs + part.carbs,
            fat=total.fat + part.fat,
        )
    return total


def entry_contribution(entry: CompositionEntry) -> MacroTotals:
    """Return the macros and raw mass one entry adds to a session."""
    quantity = quantity_value(entry.quantity)
    if quantity <= 0:
        return ZERO_TOTALS
    if entry.measure_kind == MeasureKind.PIECE:
        factor = quantity
        mass = quantity * _to_float(entry.mass_per_piece)
    else:
        factor = quantity / 100.0
        mass = quantity
    return MacroTotals(
        total_mass=mass,
        calories=_to_float(entry.calories) * factor,
        protein=_to_float(entry.protein) * factor,
        carbs=_to_float(entry.carbs) * factor,
        fat=_to_float(entry.fat) * factor,
    )


def quantity_value(value: object) -> float:
    """Coerce a user-entered quantity, treating invalid input as zero."""
    quantity = _to_float(value)
    return quantity if quantity > 0 else 0.0


def _to_float(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number
