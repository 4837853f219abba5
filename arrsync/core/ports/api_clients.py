"""
Interfaces ports pour le client API Radarr/Sonarr.

Interface abstraite (port) définissant le contrat consommé par les stores.
L'implémentation (adaptateur httpx) se trouve dans adapters/api/arr_client.py.

Toutes les méthodes sont des points de suspension : elles peuvent lever
n'importe quelle erreur de transport ou de décodage, ou être annulées.
Le classifieur d'erreurs ramène ces échecs à la taxonomie fermée.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from arrsync.core.entities import (
    Episode,
    Instance,
    InstanceStatus,
    MediaHistoryEvent,
    Movie,
    MovieRelease,
    QualityProfile,
    Series,
)


class CommandKind(Enum):
    """Commandes serveur déclenchables depuis l'interface."""

    AUTOMATIC_SEARCH = "automatic_search"
    REFRESH = "refresh"


@dataclass
class HistoryPage:
    """
    Page d'historique renvoyée par /api/v3/history.

    Attributs :
        records : Evènements, dans l'ordre renvoyé par le serveur
        total_records : Nombre total d'évènements côté serveur
    """

    records: list[MediaHistoryEvent] = field(default_factory=list)
    total_records: int = 0


class IArrAPIClient(ABC):
    """
    Interface du client API pour les serveurs Radarr et Sonarr.

    Le client est partagé entre toutes les instances et tous les stores :
    chaque appel reçoit l'instance ciblée et ne conserve aucun état métier.
    """

    @abstractmethod
    async def fetch_movies(self, instance: Instance) -> list[Movie]:
        """Récupère tous les films d'une instance Radarr."""
        ...

    @abstractmethod
    async def fetch_series(self, instance: Instance) -> list[Series]:
        """Récupère toutes les séries d'une instance Sonarr."""
        ...

    @abstractmethod
    async def fetch_episodes(self, series_id: int, instance: Instance) -> list[Episode]:
        """Récupère les épisodes d'une série."""
        ...

    @abstractmethod
    async def monitor_movies(
        self, ids: Sequence[int], monitored: bool, instance: Instance
    ) -> None:
        """Active ou désactive la surveillance d'un lot de films."""
        ...

    @abstractmethod
    async def monitor_episodes(
        self, ids: Sequence[int], monitored: bool, instance: Instance
    ) -> None:
        """Active ou désactive la surveillance d'un lot d'épisodes."""
        ...

    @abstractmethod
    async def get_episode_history(
        self, episode_id: int, instance: Instance
    ) -> HistoryPage:
        """Récupère l'historique d'un épisode."""
        ...

    @abstractmethod
    async def lookup_movies(self, query: str, instance: Instance) -> list[Movie]:
        """Recherche des films à ajouter (résultats de lookup)."""
        ...

    @abstractmethod
    async def fetch_releases(self, movie_id: int, instance: Instance) -> list[MovieRelease]:
        """Lance une recherche interactive sur les indexeurs et retourne les releases d'un film."""
        ...

    @abstractmethod
    async def command(
        self, instance: Instance, kind: CommandKind, ids: Sequence[int]
    ) -> None:
        """Déclenche une commande serveur (recherche automatique, rafraîchissement)."""
        ...

    @abstractmethod
    async def system_status(self, instance: Instance) -> InstanceStatus:
        """Récupère le statut système (nom de l'application, version)."""
        ...

    @abstractmethod
    async def fetch_quality_profiles(self, instance: Instance) -> list[QualityProfile]:
        """Récupère les profils de qualité définis sur le serveur."""
        ...
