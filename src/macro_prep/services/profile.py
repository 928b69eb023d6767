"""User profile and daily target calculation."""

from dataclasses import dataclass
from typing import Protocol

from macro_prep.domain.profile import Goal, Sex, UserProfile
from macro_prep.services.aggregator import round_half_up
from macro_prep.services.events import ChangeFeed

ACTIVITY_FACTOR = 1.3
LOSE_ADJUSTMENT = -500
GAIN_ADJUSTMENT = 300
PROTEIN_PER_KG = 2


class ProfileRepository(Protocol):
    """Persistence interface for the single user profile."""

    def get_profile(self) -> UserProfile | None:
        """Return the profile, if one has been saved."""

    def save_profile(self, profile: UserProfile) -> None:
        """Replace the stored profile."""


def estimate_targets(  # noqa: PLR0913
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Sex,
    goal: Goal,
) -> UserProfile:
    """Estimate TDEE with Mifflin-St Jeor and derive calorie/protein targets."""
    if weight_kg <= 0 or height_cm <= 0 or age <= 0:
        raise ValueError("Weight, height and age must be positive")
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    bmr += 5 if sex == Sex.MALE else -161
    tdee = round_half_up(bmr * ACTIVITY_FACTOR)
    target_calories = tdee
    if goal == Goal.LOSE:
        target_calories += LOSE_ADJUSTMENT
    elif goal == Goal.GAIN:
        target_calories += GAIN_ADJUSTMENT
    return UserProfile(
        tdee=tdee,
        target_calories=target_calories,
        target_protein=round_half_up(weight_kg * PROTEIN_PER_KG),
        goal=goal,
    )


def manual_targets(calories: int, protein: int, goal: Goal) -> UserProfile:
    """Use user-supplied targets; TDEE is taken to equal the calorie target."""
    if calories <= 0 or protein <= 0:
        raise ValueError("Targets must be positive")
    return UserProfile(
        tdee=calories, target_calories=calories, target_protein=protein, goal=goal
    )


@dataclass
class ProfileService:
    """Service for reading and replacing the user profile."""

    repository: ProfileRepository
    feed: ChangeFeed

    def get(self) -> UserProfile | None:
        """Return the saved profile."""
        return self.repository.get_profile()

    def save(self, profile: UserProfile) -> UserProfile:
        """Replace the saved profile."""
        self.repository.save_profile(profile)
        self.feed.publish(["user"])
        return profile
