"""Request bodies for the HTTP API."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from macro_prep.domain.catalog import MeasureKind
from macro_prep.domain.distribution import DistributionMode
from macro_prep.domain.profile import Goal, Sex


class IngredientCreate(BaseModel):
    name: str
    calories: float = Field(default=0.0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    category: str = "other"
    measure_kind: MeasureKind = MeasureKind.MASS
    mass_per_piece: float | None = None


class IngredientUpdate(BaseModel):
    name: str | None = None
    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fat: float | None = Field(default=None, ge=0)
    category: str | None = None
    measure_kind: MeasureKind | None = None
    mass_per_piece: float | None = None


class PortionRequest(BaseModel):
    """Scale by mass or solve for a protein goal."""

    mode: DistributionMode = DistributionMode.SCALE
    target: float


class ConsumeRequest(PortionRequest):
    day: date | None = None


class EntryAdd(BaseModel):
    """Add either a catalog ingredient or a fridge batch to a session."""

    catalog_id: UUID | None = None
    batch_id: UUID | None = None

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "EntryAdd":
        if (self.catalog_id is None) == (self.batch_id is None):
            raise ValueError("Provide exactly one of catalog_id or batch_id")
        return self


class EntryQuantity(BaseModel):
    # Left loose so invalid input aggregates as zero instead of failing.
    quantity: float | str | None = None


class SessionUpdate(BaseModel):
    finished_mass: float | None = None
    name: str | None = None


class PromoteRequest(BaseModel):
    name: str
    finished_mass: float | None = None


class RecipeCreate(BaseModel):
    name: str


class ProfileEstimate(BaseModel):
    """Body measurements for Mifflin-St Jeor."""

    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    age: int = Field(gt=0)
    sex: Sex
    goal: Goal = Goal.MAINTAIN


class ProfileManual(BaseModel):
    target_calories: int = Field(gt=0)
    target_protein: int = Field(gt=0)
    goal: Goal = Goal.MAINTAIN
