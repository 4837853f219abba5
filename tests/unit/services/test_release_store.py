"""
Tests unitaires pour ReleaseStore (recherche interactive d'un film).

Couvre:
- Les releases d'un autre film sont videes avant le chargement
- maybe_fetch() ne relance pas la recherche pour le meme film
- Filtres sur les releases rejetees et les seeders
- Un echec conserve les releases et enregistre l'erreur classifiee
"""

import asyncio

import httpx
import pytest

from arrsync.core.entities import PeerHealth
from arrsync.core.value_objects import NetworkUnreachable
from arrsync.services.releases import ReleaseStore
from tests.fixtures.factories import make_release


@pytest.fixture
def store(radarr_instance, mock_api) -> ReleaseStore:
    return ReleaseStore(radarr_instance, mock_api)


class TestFetch:
    """Tests de fetch() et maybe_fetch()."""

    @pytest.mark.asyncio
    async def test_fetch_passes_movie_id(self, store, mock_api) -> None:
        """Le film vise est transmis au client API avec l'instance du store."""
        mock_api.fetch_releases.return_value = [make_release("a", 1), make_release("b", 1)]

        assert await store.fetch(1) is True

        assert [r.guid for r in store.items] == ["a", "b"]
        mock_api.fetch_releases.assert_awaited_once_with(1, store.instance)

    @pytest.mark.asyncio
    async def test_maybe_fetch_skips_same_movie(self, store, mock_api) -> None:
        """Les releases deja detenues pour ce film ne sont pas recherchees a nouveau."""
        mock_api.fetch_releases.return_value = [make_release("a", 1)]

        assert await store.maybe_fetch(1) is True
        assert await store.maybe_fetch(1) is False

        assert mock_api.fetch_releases.await_count == 1

    @pytest.mark.asyncio
    async def test_maybe_fetch_other_movie(self, store, mock_api) -> None:
        """Un autre film declenche une nouvelle recherche."""
        store.items = [make_release("a", 1)]
        mock_api.fetch_releases.return_value = [make_release("z", 2)]

        assert await store.maybe_fetch(2) is True

        assert store.by_parent_id(2)[0].guid == "z"
        assert store.by_parent_id(1) == []

    @pytest.mark.asyncio
    async def test_releases_of_other_movie_cleared_before_request(self, store, mock_api) -> None:
        """Les releases d'un autre film ne restent pas affichees pendant la recherche."""
        store.items = [make_release("a", 1)]
        gate = asyncio.Event()

        async def slow(movie_id, instance):
            await gate.wait()
            return [make_release("z", movie_id)]

        mock_api.fetch_releases.side_effect = slow
        task = asyncio.create_task(store.fetch(2))
        await asyncio.sleep(0)

        assert store.items == []
        gate.set()
        assert await task is True
        assert [r.guid for r in store.items] == ["z"]

    @pytest.mark.asyncio
    async def test_failure_keeps_releases(self, store, mock_api) -> None:
        """Un echec conserve les releases et enregistre l'erreur classifiee."""
        store.items = [make_release("a", 1)]
        mock_api.fetch_releases.side_effect = httpx.ReadTimeout("timed out")

        assert await store.fetch(1) is False

        assert [r.guid for r in store.items] == ["a"]
        assert store.error == NetworkUnreachable("timed out")


class TestLookups:
    """Tests des recherches locales."""

    def test_by_guid(self, store) -> None:
        """by_guid retrouve une release ou retourne None."""
        store.items = [make_release("a", 1), make_release("b", 1)]
        assert store.by_guid("b").guid == "b"
        assert store.by_guid("missing") is None

    def test_approved_excludes_rejected(self, store) -> None:
        """approved() ne garde que les releases acceptables par le serveur."""
        store.items = [make_release("a", 1, rejected=True), make_release("b", 1)]
        assert [r.guid for r in store.approved()] == ["b"]

    def test_by_peer_health(self, store) -> None:
        """Les releases sont filtrables par tranche de seeders."""
        store.items = [
            make_release("a", 1, seeders=75),
            make_release("b", 1, seeders=12),
            make_release("c", 1, seeders=0),
        ]
        assert [r.guid for r in store.by_peer_health(PeerHealth.MEDIUM)] == ["b"]
        assert [r.guid for r in store.by_peer_health(PeerHealth.NONE)] == ["c"]
