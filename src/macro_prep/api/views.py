"""Response shapes built from domain objects."""

from dataclasses import asdict

from macro_prep.domain.composition import CompositionSession
from macro_prep.domain.inventory import InventoryBatch
from macro_prep.services.aggregator import aggregate, round_half_up


def session_view(session: CompositionSession) -> dict[str, object]:
    """Return a session with its entries and display-rounded totals."""
    totals = aggregate(session)
    return {
        "id": session.id,
        "name": session.name,
        "finished_mass": session.finished_mass,
        "entries": session.entries,
        "totals": {
            "total_mass": round_half_up(totals.total_mass),
            "calories": round_half_up(totals.calories),
            "protein": round_half_up(totals.protein),
            "carbs": round_half_up(totals.carbs),
            "fat": round_half_up(totals.fat),
        },
    }


def batch_view(batch: InventoryBatch) -> dict[str, object]:
    """Return a batch with its remaining share."""
    return {**asdict(batch), "percent_remaining": batch.percent_remaining}
