"""
Etat observable des stores.

Chaque store herite d'ObservableState : apres chaque mutation il appelle
_notify(), qui invoque synchroniquement tous les abonnes avec le store.
La couche de presentation relit alors snapshot().

Les callbacks sont appeles depuis la boucle asyncio proprietaire du store.
Une exception dans un abonne est journalisee et n'empeche pas les autres
abonnes d'etre notifies.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from loguru import logger

from arrsync.core.value_objects import APIError

T = TypeVar("T")

Subscriber = Callable[[Any], None]


@dataclass(frozen=True)
class StoreSnapshot(Generic[T]):
    """
    Vue en lecture seule de l'etat d'un store.

    Attributes:
        items: Collection courante, dans l'ordre du serveur
        error: Derniere erreur classifiee, ou None
        is_fetching: Une requete de liste est en cours
        busy_indicator: ID de l'entite visee par la commande en cours, ou None
    """

    items: tuple[T, ...] = ()
    error: Optional[APIError] = None
    is_fetching: bool = False
    busy_indicator: Optional[int] = None


class ObservableState:
    """Mecanisme publish/subscribe minimal pour les stores."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._notification_count = 0

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Abonne un callback aux mutations du store.

        Args:
            callback: Fonction appelee avec le store apres chaque mutation

        Returns:
            Fonction sans argument qui desabonne le callback
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def notification_count(self) -> int:
        """Nombre de notifications emises depuis la creation."""
        return self._notification_count

    def _notify(self) -> None:
        self._notification_count += 1
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception as e:
                logger.exception(f"Erreur dans un abonne de {type(self).__name__}: {e}")
