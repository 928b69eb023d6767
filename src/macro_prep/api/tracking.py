"""Dashboard, statistics and profile endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from macro_prep.api.auth import require_token
from macro_prep.api.models import ProfileEstimate, ProfileManual  # noqa: TC001
from macro_prep.services.profile import estimate_targets, manual_targets
from macro_prep.services.stats import PeriodSummary, consistency

if TYPE_CHECKING:
    from macro_prep.containers import AppContainer

router = APIRouter(tags=["tracking"], dependencies=[Depends(require_token)])


@router.get("/dashboard")
async def dashboard(request: Request, day: date | None = None) -> dict[str, object]:
    """Return progress against targets and a protein recommendation."""
    container: AppContainer = request.app.state.container
    return {"dashboard": container.dashboard_service.build(day)}


@router.get("/stats/day")
async def stats_day(request: Request, day: date | None = None) -> dict[str, object]:
    """Return totals for a day."""
    container: AppContainer = request.app.state.container
    return {"totals": container.stats_service.get_day(day)}


@router.get("/stats/week")
async def stats_week(request: Request, end: date | None = None) -> dict[str, object]:
    """Return the last seven days with averages."""
    container: AppContainer = request.app.state.container
    return _period(container, container.stats_service.get_week(end))


@router.get("/stats/month")
async def stats_month(request: Request, day: date | None = None) -> dict[str, object]:
    """Return every day of a month with averages."""
    container: AppContainer = request.app.state.container
    return _period(container, container.stats_service.get_month(day))


@router.get("/profile")
async def get_profile(request: Request) -> dict[str, object]:
    """Return the saved profile, or null when none is set."""
    container: AppContainer = request.app.state.container
    return {"profile": container.profile_service.get()}


@router.put("/profile/estimate")
async def estimate_profile(
    body: ProfileEstimate, request: Request
) -> dict[str, object]:
    """Derive targets from body measurements and save them."""
    container: AppContainer = request.app.state.container
    profile = estimate_targets(
        weight_kg=body.weight_kg,
        height_cm=body.height_cm,
        age=body.age,
        sex=body.sex,
        goal=body.goal,
    )
    return {"profile": container.profile_service.save(profile)}


@router.put("/profile/manual")
async def manual_profile(body: ProfileManual, request: Request) -> dict[str, object]:
    """Save user-chosen targets."""
    container: AppContainer = request.app.state.container
    profile = manual_targets(body.target_calories, body.target_protein, body.goal)
    return {"profile": container.profile_service.save(profile)}


def _period(container: AppContainer, summary: PeriodSummary) -> dict[str, object]:
    profile = container.profile_service.get()
    return {
        "summary": summary,
        "consistency": consistency(summary, profile) if profile else None,
    }
