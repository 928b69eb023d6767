"""Fridge and consumption log endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from macro_prep.api.auth import require_token
from macro_prep.api.models import ConsumeRequest, PortionRequest  # noqa: TC001
from macro_prep.api.views import batch_view

if TYPE_CHECKING:
    from macro_prep.containers import AppContainer

router = APIRouter(tags=["inventory"], dependencies=[Depends(require_token)])


@router.get("/fridge")
async def list_batches(request: Request) -> dict[str, object]:
    """Return fridge batches."""
    container: AppContainer = request.app.state.container
    return {"batches": [batch_view(batch) for batch in container.ledger.list_batches()]}


@router.get("/fridge/{batch_id}")
async def get_batch(batch_id: UUID, request: Request) -> dict[str, object]:
    """Return one fridge batch."""
    container: AppContainer = request.app.state.container
    return {"batch": batch_view(container.ledger.get_batch(batch_id))}


@router.post("/fridge/{batch_id}/portion")
async def portion_from_batch(
    batch_id: UUID, body: PortionRequest, request: Request
) -> dict[str, object]:
    """Solve a portion against a batch without writing anything."""
    container: AppContainer = request.app.state.container
    return {
        "portion": container.ledger.portion_from_batch(batch_id, body.mode, body.target)
    }


@router.post("/fridge/{batch_id}/consume", status_code=status.HTTP_201_CREATED)
async def consume_from_batch(
    batch_id: UUID, body: ConsumeRequest, request: Request
) -> dict[str, object]:
    """Log a portion of a batch and deplete it."""
    container: AppContainer = request.app.state.container
    record = container.ledger.consume_from_batch(
        batch_id,
        body.mode,
        body.target,
        body.day or container.stats_service.today(),
    )
    return {"record": record}


@router.delete("/fridge/{batch_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_batch(batch_id: UUID, request: Request) -> None:
    """Throw a batch away without logging it."""
    container: AppContainer = request.app.state.container
    container.ledger.discard_batch(batch_id)


@router.get("/logs")
async def list_logs(request: Request, day: date | None = None) -> dict[str, object]:
    """Return consumption records, optionally for one day."""
    container: AppContainer = request.app.state.container
    return {"logs": container.ledger.list_records(day)}


@router.delete("/logs/{record_id}")
async def refund(record_id: UUID, request: Request) -> dict[str, object]:
    """Delete a record and return its mass to the fridge."""
    container: AppContainer = request.app.state.container
    restored = container.ledger.refund(record_id)
    return {"batch": batch_view(restored) if restored else None}
