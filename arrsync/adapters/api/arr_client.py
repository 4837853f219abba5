"""
Client API v3 pour les serveurs Radarr et Sonarr.

Implemente IArrAPIClient avec httpx. Un client HTTP est cree paresseusement
par instance (URL + cle API) pour beneficier du connection pooling ; le
client reste sans etat metier et peut etre appele en parallele depuis
plusieurs stores.

Les erreurs ne sont pas converties ici : httpx.HTTPStatusError,
httpx.TransportError et json.JSONDecodeError remontent telles quelles et
sont classifiees par services/error_classifier.py. Seules les reponses 429
sont relancees (voir retry.py).

Usage:
    client = ArrAPIClient(timeout=30.0)
    movies = await client.fetch_movies(instance)
    await client.close()
"""

from typing import Any, Optional, Sequence

import httpx
from loguru import logger

from arrsync.adapters.api import decoders
from arrsync.adapters.api.retry import request_with_retry
from arrsync.core.entities import (
    Episode,
    Instance,
    InstanceStatus,
    InstanceType,
    Movie,
    MovieRelease,
    QualityProfile,
    Series,
)
from arrsync.core.ports.api_clients import CommandKind, HistoryPage, IArrAPIClient


# Nom de commande serveur et champ portant les IDs, par type d'instance
_COMMANDS: dict[tuple[InstanceType, CommandKind], tuple[str, str]] = {
    (InstanceType.RADARR, CommandKind.AUTOMATIC_SEARCH): ("MoviesSearch", "movieIds"),
    (InstanceType.RADARR, CommandKind.REFRESH): ("RefreshMovie", "movieIds"),
    (InstanceType.SONARR, CommandKind.AUTOMATIC_SEARCH): ("EpisodeSearch", "episodeIds"),
    (InstanceType.SONARR, CommandKind.REFRESH): ("RefreshSeries", "seriesId"),
}


def build_command_body(
    instance_type: InstanceType, kind: CommandKind, ids: Sequence[int]
) -> dict[str, Any]:
    """
    Construit le corps JSON d'une commande POST /api/v3/command.

    RefreshSeries n'accepte qu'une serie : seul le premier ID est envoye.
    """
    name, field_name = _COMMANDS[(instance_type, kind)]
    if field_name == "seriesId":
        return {"name": name, field_name: ids[0]}
    return {"name": name, field_name: list(ids)}


class ArrAPIClient(IArrAPIClient):
    """
    Client HTTP partage pour les API Radarr/Sonarr v3.

    Attributes:
        API_PREFIX: Prefixe des routes de l'API v3
        RELEASE_SEARCH_TIMEOUT: Timeout minimum d'une recherche interactive,
                                qui interroge tous les indexeurs du serveur
    """

    API_PREFIX = "/api/v3"
    RELEASE_SEARCH_TIMEOUT = 120.0

    def __init__(
        self,
        timeout: float = 30.0,
        max_attempts: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialise le client.

        Args:
            timeout: Timeout des requetes en secondes
            max_attempts: Tentatives maximum sur reponse 429
            transport: Transport httpx optionnel (tests)
        """
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._transport = transport
        self._clients: dict[tuple[str, str], httpx.AsyncClient] = {}

    def _get_client(self, instance: Instance) -> httpx.AsyncClient:
        """Retourne le client HTTP de l'instance, le cree si necessaire."""
        key = (instance.url, instance.api_key)
        client = self._clients.get(key)
        if client is None or client.is_closed:
            client = httpx.AsyncClient(
                base_url=instance.url.rstrip("/") + self.API_PREFIX,
                headers={
                    "Accept": "application/json",
                    "X-Api-Key": instance.api_key,
                },
                timeout=httpx.Timeout(self._timeout, connect=10.0),
                transport=self._transport,
            )
            self._clients[key] = client
        return client

    async def _request(
        self, instance: Instance, method: str, path: str, **kwargs
    ) -> httpx.Response:
        logger.debug(f"{method} {path}", instance=instance.label)
        return await request_with_retry(
            self._get_client(instance),
            method,
            path,
            max_attempts=self._max_attempts,
            **kwargs,
        )

    async def _get_json(self, instance: Instance, path: str, **kwargs) -> Any:
        response = await self._request(instance, "GET", path, **kwargs)
        return response.json()

    async def fetch_movies(self, instance: Instance) -> list[Movie]:
        data = await self._get_json(instance, "/movie")
        return decoders.decode_movies(data, instance.id)

    async def fetch_series(self, instance: Instance) -> list[Series]:
        data = await self._get_json(instance, "/series")
        return decoders.decode_series_list(data, instance.id)

    async def fetch_episodes(self, series_id: int, instance: Instance) -> list[Episode]:
        data = await self._get_json(instance, "/episode", params={"seriesId": series_id})
        return decoders.decode_episodes(data, instance.id)

    async def monitor_movies(
        self, ids: Sequence[int], monitored: bool, instance: Instance
    ) -> None:
        await self._request(
            instance,
            "PUT",
            "/movie/editor",
            json={"movieIds": list(ids), "monitored": monitored},
        )

    async def monitor_episodes(
        self, ids: Sequence[int], monitored: bool, instance: Instance
    ) -> None:
        await self._request(
            instance,
            "PUT",
            "/episode/monitor",
            json={"episodeIds": list(ids), "monitored": monitored},
        )

    async def get_episode_history(
        self, episode_id: int, instance: Instance
    ) -> HistoryPage:
        data = await self._get_json(instance, "/history", params={"episodeId": episode_id})
        return decoders.decode_history_page(data, instance.id)

    async def lookup_movies(self, query: str, instance: Instance) -> list[Movie]:
        data = await self._get_json(instance, "/movie/lookup", params={"term": query})
        return decoders.decode_movies(data, instance.id)

    async def fetch_releases(self, movie_id: int, instance: Instance) -> list[MovieRelease]:
        data = await self._get_json(
            instance,
            "/release",
            params={"movieId": movie_id},
            timeout=max(self._timeout, self.RELEASE_SEARCH_TIMEOUT),
        )
        return decoders.decode_releases(data, instance.id, movie_id)

    async def command(
        self, instance: Instance, kind: CommandKind, ids: Sequence[int]
    ) -> None:
        body = build_command_body(instance.type, kind, ids)
        await self._request(instance, "POST", "/command", json=body)

    async def system_status(self, instance: Instance) -> InstanceStatus:
        data = await self._get_json(instance, "/system/status")
        return decoders.decode_status(data)

    async def fetch_quality_profiles(self, instance: Instance) -> list[QualityProfile]:
        data = await self._get_json(instance, "/qualityprofile")
        return decoders.decode_quality_profiles(data)

    async def close(self) -> None:
        """Ferme tous les clients HTTP ouverts."""
        for client in self._clients.values():
            await client.aclose()
        self._clients.clear()
