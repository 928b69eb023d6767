"""Weight/nutrient solvers over a finished session or an inventory batch."""

from macro_prep.domain.composition import CompositionSession
from macro_prep.domain.distribution import (
    DistributionMode,
    LimitAxis,
    LimitExceeded,
    Portion,
    PortionSource,
    SplitAdvice,
)
from macro_prep.domain.inventory import InventoryBatch
from macro_prep.services.aggregator import aggregate, quantity_value, round_half_up

SPLIT_THRESHOLD = 500
SPLIT_COUNT = 2


def source_from_session(session: CompositionSession) -> PortionSource:
    """Build a portion source from a session at its finished mass.

    Falls back to the raw total mass when no finished mass has been set.
    """
    totals = aggregate(session)
    finished = quantity_value(session.finished_mass) or totals.total_mass
    return PortionSource(
        name=session.name or _session_name(session),
        reference_mass=finished,
        calories=totals.calories,
        protein=totals.protein,
        carbs=totals.carbs,
        fat=totals.fat,
        ceiling=finished,
    )


def source_from_batch(batch: InventoryBatch) -> PortionSource:
    """Build a portion source from a batch's per-100 densities."""
    return PortionSource(
        name=batch.name,
        reference_mass=100.0,
        calories=batch.calories,
        protein=batch.protein,
        carbs=batch.carbs,
        fat=batch.fat,
        ceiling=batch.current_mass,
        batch_id=batch.id,
    )


def scale(source: PortionSource, mass: object) -> Portion:
    """Solve nutrients for a target mass."""
    return _resolve(source, quantity_value(mass), DistributionMode.SCALE)


def goal(source: PortionSource, protein: object) -> Portion:
    """Solve the mass that delivers a target amount of protein."""
    target = quantity_value(protein)
    if target <= 0:
        return _empty(DistributionMode.GOAL)
    if source.protein <= 0 or source.reference_mass <= 0:
        return Portion(
            mode=DistributionMode.GOAL,
            mass=0,
            calories=0,
            protein=0,
            carbs=0,
            fat=0,
            no_solution=True,
        )
    mass = round_half_up(target / source.protein * source.reference_mass)
    exceeded = target > source.protein * source.ceiling / source.reference_mass
    return _resolve(source, float(mass), DistributionMode.GOAL, exceeded)


def distribute(
    source: PortionSource, mode: DistributionMode, target: object
) -> Portion:
    """Dispatch to the scale or goal solver."""
    if mode == DistributionMode.GOAL:
        return goal(source, target)
    return scale(source, target)


def split_advice(mass: int) -> SplitAdvice | None:
    """Advise splitting portions above the threshold into equal halves."""
    if mass <= SPLIT_THRESHOLD:
        return None
    return SplitAdvice(
        count=SPLIT_COUNT, portion_mass=round_half_up(mass / SPLIT_COUNT)
    )


def _resolve(
    source: PortionSource,
    mass: float,
    mode: DistributionMode,
    exceeded: bool = False,
) -> Portion:
    if mass <= 0:
        return _empty(mode)
    ratio = mass / source.reference_mass if source.reference_mass > 0 else 0.0
    limit = None
    if exceeded or mass > source.ceiling:
        limit = LimitExceeded(
            axis=(
                LimitAxis.MASS if mode == DistributionMode.SCALE else LimitAxis.PROTEIN
            ),
            ceiling=round_half_up(source.ceiling),
            available_protein=_available_protein(source),
        )
    rounded_mass = round_half_up(mass)
    return Portion(
        mode=mode,
        mass=rounded_mass,
        calories=round_half_up(source.calories * ratio),
        protein=round_half_up(source.protein * ratio),
        carbs=round_half_up(source.carbs * ratio),
        fat=round_half_up(source.fat * ratio),
        limit=limit,
        split=split_advice(rounded_mass),
    )


def _available_protein(source: PortionSource) -> int:
    if source.reference_mass <= 0:
        return 0
    return round_half_up(source.protein * source.ceiling / source.reference_mass)


def _empty(mode: DistributionMode) -> Portion:
    return Portion(mode=mode, mass=0, calories=0, protein=0, carbs=0, fat=0)


def _session_name(session: CompositionSession) -> str:
    if len(session.entries) == 1:
        return session.entries[0].name
    return "Meal Batch"
