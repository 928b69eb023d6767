"""Domain models for the user profile and targets."""

from dataclasses import dataclass
from enum import StrEnum


class Goal(StrEnum):
    """Body-weight goal driving calorie targets."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class Sex(StrEnum):
    """Sex used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class UserProfile:
    """Daily nutrition targets."""

    tdee: int
    target_calories: int
    target_protein: int
    goal: Goal
