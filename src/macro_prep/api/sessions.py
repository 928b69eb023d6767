"""Composition session endpoints: build a pot, portion it, log or store it."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from macro_prep.api.auth import require_token
from macro_prep.api.models import (  # noqa: TC001
    ConsumeRequest,
    EntryAdd,
    EntryQuantity,
    PortionRequest,
    PromoteRequest,
    RecipeCreate,
    SessionUpdate,
)
from macro_prep.api.views import batch_view, session_view
from macro_prep.services.distribution import distribute, source_from_session

if TYPE_CHECKING:
    from macro_prep.containers import AppContainer

router = APIRouter(
    prefix="/sessions", tags=["sessions"], dependencies=[Depends(require_token)]
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def open_session(request: Request) -> dict[str, object]:
    """Open an empty session."""
    container: AppContainer = request.app.state.container
    return session_view(container.sessions.open())


@router.get("/search")
async def search(request: Request, q: str = "") -> dict[str, object]:
    """Search fridge batches and catalog entries for the pot."""
    container: AppContainer = request.app.state.container
    return {"results": container.composition_service.search(q)}


@router.get("/{session_id}")
async def get_session(session_id: UUID, request: Request) -> dict[str, object]:
    """Return a session's entries and live totals."""
    container: AppContainer = request.app.state.container
    return session_view(container.sessions.get(session_id))


@router.patch("/{session_id}")
async def update_session(
    session_id: UUID, body: SessionUpdate, request: Request
) -> dict[str, object]:
    """Set the finished mass or name of a session."""
    container: AppContainer = request.app.state.container
    session = container.sessions.get(session_id)
    fields = body.model_dump(exclude_unset=True)
    if "finished_mass" in fields:
        session.finished_mass = fields["finished_mass"]
    if "name" in fields:
        session.name = fields["name"]
    return session_view(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(session_id: UUID, request: Request) -> None:
    """Discard a session without writing anything."""
    container: AppContainer = request.app.state.container
    container.sessions.get(session_id)
    container.sessions.close(session_id)


@router.post("/{session_id}/entries", status_code=status.HTTP_201_CREATED)
async def add_entry(
    session_id: UUID, body: EntryAdd, request: Request
) -> dict[str, object]:
    """Snapshot an ingredient or fridge batch into the session."""
    container: AppContainer = request.app.state.container
    session = container.sessions.get(session_id)
    if body.catalog_id is not None:
        container.composition_service.add_catalog_entry(session, body.catalog_id)
    elif body.batch_id is not None:
        container.composition_service.add_batch_entry(session, body.batch_id)
    return session_view(session)


@router.patch("/{session_id}/entries/{entry_id}")
async def set_entry_quantity(
    session_id: UUID, entry_id: UUID, body: EntryQuantity, request: Request
) -> dict[str, object]:
    """Change an entry's quantity."""
    container: AppContainer = request.app.state.container
    session = container.sessions.get(session_id)
    container.composition_service.set_quantity(session, entry_id, body.quantity)
    return session_view(session)


@router.delete("/{session_id}/entries/{entry_id}")
async def remove_entry(
    session_id: UUID, entry_id: UUID, request: Request
) -> dict[str, object]:
    """Remove an entry from the session."""
    container: AppContainer = request.app.state.container
    session = container.sessions.get(session_id)
    container.composition_service.remove_entry(session, entry_id)
    return session_view(session)


@router.post("/{session_id}/portion")
async def portion(
    session_id: UUID, body: PortionRequest, request: Request
) -> dict[str, object]:
    """Solve a portion of the finished session without writing anything."""
    container: AppContainer = request.app.state.container
    session = container.sessions.get(session_id)
    return {
        "portion": distribute(source_from_session(session), body.mode, body.target)
    }


@router.post("/{session_id}/consume", status_code=status.HTTP_201_CREATED)
async def consume(
    session_id: UUID, body: ConsumeRequest, request: Request
) -> dict[str, object]:
    """Log a portion and deplete any fridge batches the session used."""
    container: AppContainer = request.app.state.container
    session = container.sessions.get(session_id)
    solved = distribute(source_from_session(session), body.mode, body.target)
    record = container.ledger.consume_session(
        session, solved, body.day or container.stats_service.today()
    )
    container.sessions.close(session_id)
    return {"record": record}


@router.post("/{session_id}/promote", status_code=status.HTTP_201_CREATED)
async def promote(
    session_id: UUID, body: PromoteRequest, request: Request
) -> dict[str, object]:
    """Store the cooked session in the fridge."""
    container: AppContainer = request.app.state.container
    session = container.sessions.get(session_id)
    finished = (
        body.finished_mass if body.finished_mass is not None else session.finished_mass
    )
    batch = container.ledger.promote_session(session, finished, body.name)
    container.sessions.close(session_id)
    return {"batch": batch_view(batch)}


@router.post("/{session_id}/recipe", status_code=status.HTTP_201_CREATED)
async def save_recipe(
    session_id: UUID, body: RecipeCreate, request: Request
) -> dict[str, object]:
    """Save the session as a reusable recipe."""
    container: AppContainer = request.app.state.container
    session = container.sessions.get(session_id)
    return {"recipe": container.recipe_service.save_from_session(session, body.name)}
