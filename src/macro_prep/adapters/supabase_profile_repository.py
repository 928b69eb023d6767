"""Supabase repository for the user profile."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from macro_prep.domain.profile import Goal, UserProfile
from macro_prep.services.profile import ProfileRepository

PROFILE_ROW_ID = 1


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation storing the profile as a single row."""

    client: Client

    def get_profile(self) -> UserProfile | None:
        """Return the stored profile."""
        response = (
            self.client.table("user_profile")
            .select("tdee, target_calories, target_protein, goal")
            .eq("id", PROFILE_ROW_ID)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return UserProfile(
            tdee=int(row.get("tdee") or 0),
            target_calories=int(row.get("target_calories") or 0),
            target_protein=int(row.get("target_protein") or 0),
            goal=Goal(str(row.get("goal") or Goal.MAINTAIN)),
        )

    def save_profile(self, profile: UserProfile) -> None:
        """Insert or replace the profile row."""
        self.client.table("user_profile").upsert(
            {
                "id": PROFILE_ROW_ID,
                "tdee": profile.tdee,
                "target_calories": profile.target_calories,
                "target_protein": profile.target_protein,
                "goal": profile.goal.value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).execute()
