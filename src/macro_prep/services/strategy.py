"""Recommend the fridge batch that best closes a protein deficit."""

import math

from macro_prep.domain.distribution import Recommendation
from macro_prep.domain.inventory import InventoryBatch
from macro_prep.services.distribution import goal, scale, source_from_batch

MIN_PROTEIN_DENSITY = 0.1
MIN_DEFICIT = 2


def recommend(
    batches: list[InventoryBatch], remaining_protein: float
) -> Recommendation | None:
    """Return at most one recommendation, or None when nothing helps."""
    if remaining_protein <= MIN_DEFICIT:
        return None
    candidates = [batch for batch in batches if batch.protein > MIN_PROTEIN_DENSITY]
    if not candidates:
        return None
    # max() keeps the first batch on ties, preserving listing order.
    best = max(candidates, key=lambda batch: batch.protein)
    source = source_from_batch(best)
    portion = goal(source, remaining_protein)
    if portion.limit is not None:
        # Whole grams that never exceed what is on hand.
        available = math.floor(best.current_mass)
        portion = scale(source, available)
        return Recommendation(
            batch_id=best.id,
            name=best.name,
            mass=available,
            protein=portion.protein,
            partial=True,
            split=portion.split,
        )
    return Recommendation(
        batch_id=best.id,
        name=best.name,
        mass=portion.mass,
        protein=portion.protein,
        partial=False,
        split=portion.split,
    )
