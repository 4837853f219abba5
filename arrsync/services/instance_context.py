"""
Contexte d'une instance selectionnee.

InstanceContext possede tous les stores d'une instance. Il est cree quand
l'utilisateur selectionne une instance et ferme quand il en change : aucun
store n'est partage entre deux instances, les entites en cache ne peuvent
donc pas fuir d'une instance a l'autre.
"""

from typing import Optional

from loguru import logger

from arrsync.core.entities import Instance, InstanceType
from arrsync.core.ports.api_clients import IArrAPIClient
from arrsync.services.entity_store import DEFAULT_FRESHNESS_WINDOW, Clock, utcnow
from arrsync.services.episodes import EpisodeStore
from arrsync.services.lookup import LookupStore
from arrsync.services.movies import MovieStore
from arrsync.services.quality_profiles import QualityProfileStore
from arrsync.services.releases import ReleaseStore
from arrsync.services.search_debouncer import DEFAULT_DEBOUNCE_WINDOW, SearchDebouncer
from arrsync.services.series import SeriesStore


class InstanceContext:
    """
    Stores d'une instance Radarr ou Sonarr.

    Attributes:
        instance: Instance proprietaire
        movies: Films (Radarr)
        lookup: Resultats de recherche de films (Radarr)
        search: Debounce de la recherche au fil de la saisie (Radarr)
        releases: Releases de la recherche interactive d'un film (Radarr)
        series: Series (Sonarr)
        episodes: Episodes de la serie selectionnee et leur historique (Sonarr)
        quality_profiles: Profils de qualite du serveur

    Example:
        context = InstanceContext(instance, api)
        await context.movies.maybe_fetch()
        ...
        context.close()
    """

    def __init__(
        self,
        instance: Instance,
        api: IArrAPIClient,
        debounce_window: float = DEFAULT_DEBOUNCE_WINDOW,
        freshness_window: float = DEFAULT_FRESHNESS_WINDOW,
        clock: Clock = utcnow,
    ) -> None:
        self.instance = instance
        self._closed = False

        options = {"clock": clock, "freshness_window": freshness_window}
        self.movies = MovieStore(instance, api, **options)
        self.lookup = LookupStore(instance, api, **options)
        self.releases = ReleaseStore(instance, api, **options)
        self.series = SeriesStore(instance, api, **options)
        self.episodes = EpisodeStore(instance, api, **options)
        self.quality_profiles = QualityProfileStore(instance, api, **options)
        self.search = SearchDebouncer(self.lookup, window=debounce_window)

        logger.debug("Contexte d'instance cree", instance=instance.label, type=instance.type.value)

    @property
    def is_void(self) -> bool:
        """Instance incomplete (pas d'URL ou de cle API) : rien a charger."""
        return self.instance.has_empty_fields()

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_radarr(self) -> bool:
        return self.instance.type is InstanceType.RADARR

    def quality_profile_name(self, profile_id: Optional[int]) -> str:
        if profile_id is None:
            return "Unknown"
        return self.quality_profiles.name_of(profile_id)

    def close(self) -> None:
        """Annule tout le travail en cours et vide les stores (abonnes notifies)."""
        if self._closed:
            return
        self._closed = True
        self.search.close()
        for store in (
            self.movies,
            self.lookup,
            self.releases,
            self.series,
            self.episodes,
            self.quality_profiles,
        ):
            store.clear()
        logger.debug("Contexte d'instance ferme", instance=self.instance.label)
