"""
Store des films d'une instance Radarr.

Le contexte proprietaire est l'instance elle-meme : la collection est
rechargee entierement a chaque fetch.
"""

from typing import Optional, Sequence

from arrsync.core.entities import Movie
from arrsync.core.ports.api_clients import CommandKind
from arrsync.services.commands import CommandDispatcher
from arrsync.services.entity_store import EntityStore


class MovieStore(EntityStore[Movie]):
    """
    Films d'une instance Radarr.

    Example:
        movies = MovieStore(instance, api)
        await movies.maybe_fetch()
        movie = movies.by_id(42)
        if await movies.command(movie, CommandKind.AUTOMATIC_SEARCH):
            notify("Search queued")
    """

    category = "movies"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._commands = CommandDispatcher(self)

    @property
    def is_working(self) -> Optional[int]:
        """ID du film vise par la commande en cours, ou None."""
        return self.busy_indicator

    async def fetch(self) -> bool:
        return await self._run_fetch(
            lambda: self._api.fetch_movies(self.instance),
            "Movies fetch failed",
            context_key=self.instance.id,
        )

    async def maybe_fetch(self) -> bool:
        """Charge les films seulement si aucun n'est en cache pour l'instance."""
        if any(movie.instance_id == self.instance.id for movie in self.items):
            return False
        return await self.fetch()

    async def monitor(self, ids: Sequence[int], monitored: bool) -> bool:
        return await self._commands.monitor(ids, monitored, self._api.monitor_movies)

    async def command(self, movie: Movie, kind: CommandKind) -> bool:
        return await self._commands.command(movie, kind, self._api.command)
