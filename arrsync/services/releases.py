"""
Store des releases d'un film (recherche interactive Radarr).

Le contexte proprietaire est le film vise : les releases d'un autre film
sont videes avant le chargement. Une recherche interactive interroge tous
les indexeurs du serveur ; maybe_fetch() ne la relance pas tant que les
releases detenues sont celles du film demande.
"""

from typing import Hashable, Optional

from arrsync.core.entities import MovieRelease, PeerHealth
from arrsync.services.entity_store import EntityStore


class ReleaseStore(EntityStore[MovieRelease]):
    """
    Releases trouvees pour le film selectionne.

    Example:
        releases = ReleaseStore(instance, api)
        await releases.maybe_fetch(movie.id)
        for release in releases.approved():
            print(release.title, release.type_label)
    """

    category = "movies.releases"

    def _owner_key(self, item: MovieRelease) -> Hashable:
        return (item.instance_id, item.movie_id)

    def by_guid(self, guid: str) -> Optional[MovieRelease]:
        for release in self.items:
            if release.guid == guid:
                return release
        return None

    def by_parent_id(self, movie_id: int) -> list[MovieRelease]:
        return [release for release in self.items if release.movie_id == movie_id]

    def approved(self) -> list[MovieRelease]:
        """Releases que le serveur accepterait de telecharger."""
        return [release for release in self.items if not release.rejected]

    def by_peer_health(self, health: PeerHealth) -> list[MovieRelease]:
        return [release for release in self.items if release.peer_health is health]

    def fetched(self, movie_id: int) -> bool:
        return bool(self.items) and self._owner_key(self.items[0]) == (
            self.instance.id,
            movie_id,
        )

    async def fetch(self, movie_id: int) -> bool:
        return await self._run_fetch(
            lambda: self._api.fetch_releases(movie_id, self.instance),
            "Movie releases fetch failed",
            context_key=(self.instance.id, movie_id),
        )

    async def maybe_fetch(self, movie_id: int) -> bool:
        if self.fetched(movie_id):
            return False
        return await self.fetch(movie_id)
