"""Store des series d'une instance Sonarr."""

from arrsync.core.entities import Series
from arrsync.services.entity_store import EntityStore


class SeriesStore(EntityStore[Series]):
    """Series d'une instance Sonarr, rechargees entierement a chaque fetch."""

    category = "series"

    async def fetch(self) -> bool:
        return await self._run_fetch(
            lambda: self._api.fetch_series(self.instance),
            "Series fetch failed",
            context_key=self.instance.id,
        )

    async def maybe_fetch(self) -> bool:
        if any(series.instance_id == self.instance.id for series in self.items):
            return False
        return await self.fetch()
