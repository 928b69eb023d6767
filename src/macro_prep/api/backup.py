"""Backup export and restore endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response

from macro_prep.api.auth import require_token

if TYPE_CHECKING:
    from macro_prep.containers import AppContainer

router = APIRouter(
    prefix="/backup", tags=["backup"], dependencies=[Depends(require_token)]
)


@router.get("")
async def export_backup(request: Request) -> Response:
    """Download every collection as one JSON document."""
    container: AppContainer = request.app.state.container
    return Response(
        content=container.backup_service.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="macro_prep.json"'},
    )


@router.post("")
async def restore_backup(request: Request) -> dict[str, object]:
    """Replace every collection with an uploaded backup document."""
    container: AppContainer = request.app.state.container
    backup = container.backup_service.restore_json(await request.body())
    return {
        "version": backup.version,
        "ingredients": len(backup.ingredients),
        "fridge": len(backup.fridge),
        "logs": len(backup.logs),
        "recipes": None if backup.recipes is None else len(backup.recipes),
    }
