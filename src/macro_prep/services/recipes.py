"""Saved recipe templates."""

from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID, uuid4

from macro_prep.domain.composition import CompositionSession, Recipe
from macro_prep.errors import NotFoundError
from macro_prep.services.events import ChangeFeed


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def list_recipes(self) -> list[Recipe]:
        """Return all recipes."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""

    def create_recipe(self, recipe: Recipe) -> None:
        """Insert a recipe."""

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe."""


@dataclass
class RecipeService:
    """Save sessions as templates and load them back."""

    repository: RecipeRepository
    feed: ChangeFeed

    def list_recipes(self) -> list[Recipe]:
        """Return saved recipes."""
        return self.repository.list_recipes()

    def save_from_session(self, session: CompositionSession, name: str) -> Recipe:
        """Save the session's entries and finished mass under a name."""
        if not name or not name.strip():
            raise ValueError("Recipe name is required")
        if not session.entries:
            raise ValueError("Cannot save an empty session")
        recipe = Recipe(
            id=uuid4(),
            name=name.strip(),
            entries=list(session.entries),
            default_finished_mass=session.finished_mass,
        )
        self.repository.create_recipe(recipe)
        self.feed.publish(["recipes"])
        return recipe

    def load_into_session(self, recipe_id: UUID) -> CompositionSession:
        """Build a fresh session from a recipe with new entry ids."""
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return CompositionSession(
            entries=[replace(entry, id=uuid4()) for entry in recipe.entries],
            finished_mass=recipe.default_finished_mass,
            name=recipe.name,
        )

    def delete(self, recipe_id: UUID) -> None:
        """Delete a recipe."""
        if self.repository.get_recipe(recipe_id) is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        self.repository.delete_recipe(recipe_id)
        self.feed.publish(["recipes"])
