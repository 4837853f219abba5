"""
Store de l'historique d'un episode.

Les evenements d'historique de plusieurs instances peuvent coexister en
memoire : ils sont identifies par la cle composee (instance_id, id).
"""

from typing import Hashable, Optional

from arrsync.core.entities import Episode, MediaHistoryEvent
from arrsync.services.entity_store import EntityStore


class HistoryStore(EntityStore[MediaHistoryEvent]):
    """Historique de l'episode selectionne."""

    category = "series.episodes.history"

    def _owner_key(self, item: MediaHistoryEvent) -> Hashable:
        return (item.instance_id, item.episode_id)

    def by_key(self, instance_id: Optional[str], event_id: int) -> Optional[MediaHistoryEvent]:
        for event in self.items:
            if event.key == (instance_id, event_id):
                return event
        return None

    def by_parent_id(self, episode_id: int) -> list[MediaHistoryEvent]:
        return [event for event in self.items if event.episode_id == episode_id]

    def fetched(self, episode: Episode) -> bool:
        """L'historique detenu est-il deja celui de cet episode ?"""
        return bool(self.items) and self._owner_key(self.items[0]) == (
            episode.instance_id,
            episode.id,
        )

    async def fetch(self, episode: Episode) -> bool:
        async def load() -> list[MediaHistoryEvent]:
            page = await self._api.get_episode_history(episode.id, self.instance)
            return page.records

        return await self._run_fetch(
            load,
            "Episodes history fetch failed",
            context_key=(episode.instance_id, episode.id),
        )

    async def maybe_fetch(self, episode: Episode) -> bool:
        if self.fetched(episode):
            return False
        return await self.fetch(episode)
