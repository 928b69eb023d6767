"""Supabase repository for saved recipes."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_prep.domain.backup import EntryRow
from macro_prep.domain.composition import Recipe
from macro_prep.services.recipes import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipes; entries are stored as JSON."""

    client: Client

    def list_recipes(self) -> list[Recipe]:
        """Return all recipes ordered by name."""
        response = self.client.table("recipes").select("*").order("name").execute()
        return [_parse_recipe(row) for row in response.data or []]

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def create_recipe(self, recipe: Recipe) -> None:
        """Insert a recipe."""
        response = (
            self.client.table("recipes")
            .insert(
                {
                    "id": str(recipe.id),
                    "name": recipe.name,
                    "entries": [
                        EntryRow.from_entry(entry).model_dump(mode="json")
                        for entry in recipe.entries
                    ],
                    "default_finished_mass": recipe.default_finished_mass,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe")

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe."""
        self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()


def _parse_recipe(row: dict[str, object]) -> Recipe:
    raw_entries = row.get("entries")
    entries = [
        EntryRow.model_validate(item).to_entry()
        for item in (raw_entries if isinstance(raw_entries, list) else [])
    ]
    finished = row.get("default_finished_mass")
    return Recipe(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        entries=entries,
        default_finished_mass=float(finished) if finished is not None else None,
    )
