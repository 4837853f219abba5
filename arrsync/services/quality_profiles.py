"""Store des profils de qualite d'une instance."""

from arrsync.core.entities import QualityProfile
from arrsync.services.entity_store import EntityStore


class QualityProfileStore(EntityStore[QualityProfile]):
    """Profils de qualite, utilises pour afficher le nom du profil d'un film."""

    category = "quality_profiles"

    async def fetch(self) -> bool:
        return await self._run_fetch(
            lambda: self._api.fetch_quality_profiles(self.instance),
            "Quality profiles fetch failed",
        )

    async def maybe_fetch(self) -> bool:
        if self.items:
            return False
        return await self.fetch()

    def name_of(self, profile_id: int) -> str:
        profile = self.by_id(profile_id)
        return profile.name if profile else "Unknown"
