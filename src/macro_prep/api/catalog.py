"""Ingredient catalog and recipe endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from macro_prep.api.auth import require_token
from macro_prep.api.models import IngredientCreate, IngredientUpdate  # noqa: TC001
from macro_prep.api.views import session_view

if TYPE_CHECKING:
    from macro_prep.containers import AppContainer

router = APIRouter(tags=["catalog"], dependencies=[Depends(require_token)])


@router.get("/ingredients")
async def search_ingredients(
    request: Request, q: str | None = None, limit: int = 20
) -> dict[str, object]:
    """Search the catalog by name; an empty query lists entries."""
    container: AppContainer = request.app.state.container
    return {"ingredients": container.catalog_service.search(q, limit=limit)}


@router.post("/ingredients", status_code=status.HTTP_201_CREATED)
async def create_ingredient(
    body: IngredientCreate, request: Request
) -> dict[str, object]:
    """Create a catalog entry."""
    container: AppContainer = request.app.state.container
    return {"ingredient": container.catalog_service.create(body.model_dump())}


@router.patch("/ingredients/{entry_id}")
async def update_ingredient(
    entry_id: UUID, body: IngredientUpdate, request: Request
) -> dict[str, object]:
    """Change fields of a catalog entry."""
    container: AppContainer = request.app.state.container
    entry = container.catalog_service.update(
        entry_id, body.model_dump(exclude_unset=True)
    )
    return {"ingredient": entry}


@router.delete("/ingredients/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ingredient(entry_id: UUID, request: Request) -> None:
    """Delete a catalog entry."""
    container: AppContainer = request.app.state.container
    container.catalog_service.delete(entry_id)


@router.post("/ingredients/seed")
async def seed_ingredients(request: Request) -> dict[str, int]:
    """Add any default ingredients missing from the catalog."""
    container: AppContainer = request.app.state.container
    return {"added": container.catalog_service.seed_defaults()}


@router.get("/recipes")
async def list_recipes(request: Request) -> dict[str, object]:
    """Return saved recipes."""
    container: AppContainer = request.app.state.container
    return {"recipes": container.recipe_service.list_recipes()}


@router.post("/recipes/{recipe_id}/sessions", status_code=status.HTTP_201_CREATED)
async def open_recipe_session(recipe_id: UUID, request: Request) -> dict[str, object]:
    """Open a new session pre-filled from a recipe."""
    container: AppContainer = request.app.state.container
    session = container.recipe_service.load_into_session(recipe_id)
    return session_view(container.sessions.open(session))


@router.delete("/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(recipe_id: UUID, request: Request) -> None:
    """Delete a recipe."""
    container: AppContainer = request.app.state.container
    container.recipe_service.delete(recipe_id)
