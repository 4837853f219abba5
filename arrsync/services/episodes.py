"""
Store des episodes d'une serie Sonarr.

Le contexte proprietaire est la serie affichee. Quand l'utilisateur passe
d'une serie a une autre, les episodes de la precedente sont vides avant le
chargement pour ne jamais les afficher sous la nouvelle serie.

Une serie ajoutee il y a moins de freshness_window secondes est toujours
rechargee par maybe_fetch() : le serveur peut ne pas avoir encore indexe
tous ses episodes au premier affichage.
"""

from typing import Hashable, Optional, Sequence

from arrsync.core.entities import Episode, Series
from arrsync.services.commands import CommandDispatcher
from arrsync.services.entity_store import EntityStore
from arrsync.services.history import HistoryStore


class EpisodeStore(EntityStore[Episode]):
    """
    Episodes de la serie selectionnee, avec leur historique.

    Example:
        episodes = EpisodeStore(instance, api)
        await episodes.maybe_fetch(series)
        season_one = episodes.by_season_id(1)
        await episodes.monitor([e.id for e in season_one], False)
    """

    category = "series.episodes"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._commands = CommandDispatcher(self)
        self.history = HistoryStore(
            self.instance, self._api, clock=self._clock, freshness_window=self.freshness_window
        )

    @property
    def is_monitoring(self) -> Optional[int]:
        """ID de l'episode dont la surveillance est en cours de modification."""
        return self.busy_indicator

    def _owner_key(self, item: Episode) -> Hashable:
        return (item.instance_id, item.series_id)

    def by_parent_id(self, series_id: int) -> list[Episode]:
        return [episode for episode in self.items if episode.series_id == series_id]

    def by_season_id(self, season_number: int) -> list[Episode]:
        return [episode for episode in self.items if episode.season_number == season_number]

    def fetched(self, series: Series) -> bool:
        return any(
            episode.series_id == series.id and episode.instance_id == series.instance_id
            for episode in self.items
        )

    async def fetch(self, series: Series) -> bool:
        return await self._run_fetch(
            lambda: self._api.fetch_episodes(series.id, self.instance),
            "Episodes fetch failed",
            context_key=(series.instance_id, series.id),
        )

    async def maybe_fetch(self, series: Series) -> bool:
        if not self.fetched(series) or self._is_fresh(series.added):
            return await self.fetch(series)
        return False

    async def monitor(self, ids: Sequence[int], monitored: bool) -> bool:
        return await self._commands.monitor(ids, monitored, self._api.monitor_episodes)

    async def fetch_history(self, episode: Episode) -> bool:
        return await self.history.maybe_fetch(episode)

    def cancel(self) -> None:
        super().cancel()
        self.history.cancel()

    def clear(self) -> None:
        super().clear()
        self.history.clear()
