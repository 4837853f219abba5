"""
Store d'entites et coordination des requetes de liste.

EntityStore est la base commune des stores (films, series, episodes,
historique, resultats de recherche). Il detient la collection courante
d'une instance, la derniere erreur classifiee et les indicateurs d'etat,
et notifie ses abonnes apres chaque mutation.

Regles de coordination :
- Une seule requete de liste est logiquement en cours par store : lancer
  un nouveau fetch annule la requete precedente.
- Chaque fetch recoit un numero de generation ; un resultat n'est applique
  que si sa generation est toujours la derniere emise.
- En cas de succes la collection est remplacee entierement ; en cas
  d'echec elle est conservee et l'erreur classifiee est enregistree.
- L'annulation n'est jamais enregistree comme erreur.

Les methodes de mutation doivent etre appelees depuis la boucle asyncio
proprietaire du store : les mutations ne sont jamais concurrentes car elles
ne s'executent qu'a la reprise apres un point de suspension.
"""

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Generic, Hashable, Iterable, Optional, TypeVar

from loguru import logger

from arrsync.core.entities import Instance
from arrsync.core.ports.api_clients import IArrAPIClient
from arrsync.core.value_objects import APIError
from arrsync.services.error_classifier import classify_error, is_cancellation
from arrsync.services.observable import ObservableState, StoreSnapshot

T = TypeVar("T")

Clock = Callable[[], datetime]

# Fenetre pendant laquelle un contexte fraichement cree est toujours recharge
DEFAULT_FRESHNESS_WINDOW = 30.0


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def age_in_seconds(created: Optional[datetime], now: datetime) -> Optional[float]:
    """Age d'un contexte ; les dates naives sont considerees en UTC."""
    if created is None:
        return None
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return abs((now - created).total_seconds())


def _caller_is_cancelling() -> bool:
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


class EntityStore(ObservableState, Generic[T]):
    """
    Collection d'entites d'une instance avec etat de chargement.

    Attributes:
        category: Categorie utilisee dans les logs
        instance: Instance proprietaire du store
        items: Collection courante, dans l'ordre du serveur
        error: Derniere erreur classifiee (jamais Cancelled)
        is_fetching: Une requete de liste est en cours
    """

    category: str = "store"

    def __init__(
        self,
        instance: Instance,
        api: IArrAPIClient,
        clock: Clock = utcnow,
        freshness_window: float = DEFAULT_FRESHNESS_WINDOW,
    ) -> None:
        super().__init__()
        self.instance = instance
        self._api = api
        self._clock = clock
        self.freshness_window = freshness_window

        self.items: list[T] = []
        self.error: Optional[APIError] = None
        self.is_fetching: bool = False
        self.busy_indicator: Optional[int] = None

        self._generation = 0
        self._inflight: Optional[asyncio.Future] = None

    def snapshot(self) -> StoreSnapshot[T]:
        """Vue immuable de l'etat courant pour la couche de presentation."""
        return StoreSnapshot(
            items=tuple(self.items),
            error=self.error,
            is_fetching=self.is_fetching,
            busy_indicator=self.busy_indicator,
        )

    @property
    def has_error(self) -> bool:
        return self.error is not None

    @property
    def generation(self) -> int:
        """Numero du dernier fetch emis."""
        return self._generation

    def by_id(self, entity_id: int) -> Optional[T]:
        for item in self.items:
            if getattr(item, "id") == entity_id:
                return item
        return None

    def dismiss_error(self) -> None:
        """Efface l'erreur affichee (alerte fermee par l'utilisateur)."""
        if self.error is not None:
            self.error = None
            self._notify()

    def cancel(self) -> None:
        """Annule la requete de liste en cours, sans enregistrer d'erreur."""
        self._drop_inflight()
        if self.is_fetching:
            self.is_fetching = False
            self._notify()

    def clear(self) -> None:
        """Annule la requete en cours puis vide la collection et l'erreur."""
        self._drop_inflight()
        self.items = []
        self.error = None
        self.is_fetching = False
        self._notify()

    def _drop_inflight(self) -> None:
        self._generation += 1
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    def _is_fresh(self, created: Optional[datetime]) -> bool:
        age = age_in_seconds(created, self._clock())
        return age is not None and age < self.freshness_window

    def _owner_key(self, item: T) -> Hashable:
        """Contexte proprietaire d'une entite (surcharge par les sous-classes)."""
        return getattr(item, "instance_id", None)

    def _clear_stale(self, context_key: Hashable) -> None:
        """Vide la collection si elle appartient a un autre contexte."""
        if self.items and self._owner_key(self.items[0]) != context_key:
            logger.debug(
                "Collection d'un autre contexte videe avant chargement",
                category=self.category,
            )
            self.items = []

    def _record_error(self, error: APIError, message: str) -> None:
        self.error = error
        logger.error(message, category=self.category, error=repr(error))

    async def _run_fetch(
        self,
        load: Callable[[], Awaitable[Iterable[T]]],
        failure_message: str,
        context_key: Hashable = None,
    ) -> bool:
        """
        Execute une requete de liste avec annulation et generation.

        Args:
            load: Fabrique de la coroutine d'appel au client API
            failure_message: Message journalise en cas d'echec
            context_key: Contexte cible ; la collection d'un autre contexte
                         est videe avant l'appel

        Returns:
            True si le resultat a ete applique a la collection
        """
        self._generation += 1
        generation = self._generation

        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()

        if context_key is not None:
            self._clear_stale(context_key)
        self.error = None
        self.is_fetching = True
        self._notify()

        request = asyncio.ensure_future(load())
        self._inflight = request

        try:
            items = await request
        except asyncio.CancelledError:
            request.cancel()
            self._finish(generation)
            if _caller_is_cancelling():
                raise
            logger.debug("Requete annulee", category=self.category)
            return False
        except Exception as e:
            if is_cancellation(e):
                self._finish(generation)
                return False
            if generation != self._generation:
                logger.debug("Echec d'une requete perimee ignore", category=self.category)
                return False
            self._record_error(classify_error(e), failure_message)
            self._finish(generation)
            return False

        if generation != self._generation:
            logger.debug(
                "Resultat perime ignore",
                category=self.category,
                generation=generation,
                latest=self._generation,
            )
            return False

        self.items = list(items)
        logger.debug("Collection chargee", category=self.category, count=len(self.items))
        self._finish(generation)
        return True

    def _finish(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._inflight = None
        self.is_fetching = False
        self._notify()
