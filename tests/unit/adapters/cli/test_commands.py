"""
Tests unitaires pour les commandes CLI d'arrsync.

Tests couvrant:
- movies / episodes / search : affichage des collections des stores
- monitor-episodes / automatic-search : commandes de mutation
- releases : recherche interactive d'un film
- validate : validation d'une instance configuree
- Affichage des erreurs classifiees et codes de sortie
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from typer.testing import CliRunner

from arrsync.config import Settings
from arrsync.core.entities import InstanceStatus
from arrsync.core.ports.api_clients import CommandKind, IArrAPIClient
from arrsync.main import app
from arrsync.services.instance_context import InstanceContext
from arrsync.services.instance_validator import InstanceValidator
from tests.fixtures.factories import make_episode, make_movie, make_release, make_series

runner = CliRunner()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def api() -> AsyncMock:
    return AsyncMock(spec=IArrAPIClient)


@pytest.fixture
def mock_container(api, radarr_instance, sonarr_instance):
    """Mock le Container pour les tests.

    Patche Container dans helpers.py car c'est la que le decorateur
    @with_container l'importe et l'instancie.
    """
    instances = {"Synology": radarr_instance, "Synology TV": sonarr_instance}
    with patch("arrsync.adapters.cli.helpers.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance
        container_instance.config.return_value.find_instance.side_effect = instances.get
        container_instance.api_client.return_value.close = AsyncMock()
        container_instance.instance_context.side_effect = lambda instance: InstanceContext(
            instance, api, debounce_window=0.01
        )
        container_instance.instance_validator.return_value = InstanceValidator(api)
        yield container_instance


# ============================================================================
# movies
# ============================================================================


class TestMoviesCommand:
    def test_lists_movies(self, mock_container, api) -> None:
        api.fetch_movies.return_value = [
            make_movie(1, title="Dune", year=2021, quality_profile_id=4),
            make_movie(2, title="Arrival", year=2016),
        ]
        api.fetch_quality_profiles.return_value = []

        result = runner.invoke(app, ["movies", "Synology"])

        assert result.exit_code == 0, result.output
        assert "Dune" in result.output
        assert "Arrival" in result.output
        assert "Total: 2 films" in result.output
        mock_container.api_client.return_value.close.assert_awaited_once()

    def test_limit(self, mock_container, api) -> None:
        api.fetch_movies.return_value = [make_movie(1, title="Dune"), make_movie(2, title="Arrival")]
        api.fetch_quality_profiles.return_value = []

        result = runner.invoke(app, ["movies", "Synology", "--limit", "1"])

        assert result.exit_code == 0, result.output
        assert "Dune" in result.output
        assert "Arrival" not in result.output

    def test_network_error_exits_with_suggestion(self, mock_container, api) -> None:
        api.fetch_movies.side_effect = httpx.ConnectError("Connection refused")

        result = runner.invoke(app, ["movies", "Synology"])

        assert result.exit_code == 1
        assert "Server Not Reachable" in result.output
        mock_container.api_client.return_value.close.assert_awaited_once()

    def test_unknown_instance(self, mock_container) -> None:
        result = runner.invoke(app, ["movies", "Nope"])

        assert result.exit_code == 1
        assert "Instance inconnue" in result.output

    def test_wrong_instance_type(self, mock_container, api) -> None:
        result = runner.invoke(app, ["movies", "Synology TV"])

        assert result.exit_code == 1
        api.fetch_movies.assert_not_awaited()


# ============================================================================
# episodes
# ============================================================================


class TestEpisodesCommand:
    def test_lists_season(self, mock_container, api) -> None:
        api.fetch_series.return_value = [make_series(7, title="Severance")]
        api.fetch_episodes.return_value = [
            make_episode(101, 7, season_number=1, episode_number=1, title="Good News About Hell"),
            make_episode(201, 7, season_number=2, episode_number=1, title="Hello, Ms. Cobel"),
        ]

        result = runner.invoke(app, ["episodes", "Synology TV", "7", "--season", "2"])

        assert result.exit_code == 0, result.output
        assert "S02E01" in result.output
        assert "S01E01" not in result.output

    def test_unknown_series(self, mock_container, api) -> None:
        api.fetch_series.return_value = [make_series(7)]

        result = runner.invoke(app, ["episodes", "Synology TV", "99"])

        assert result.exit_code == 1
        assert "Serie introuvable" in result.output
        api.fetch_episodes.assert_not_awaited()


# ============================================================================
# search
# ============================================================================


class TestSearchCommand:
    def test_search_results(self, mock_container, api) -> None:
        api.lookup_movies.return_value = [
            make_movie(2, title="Arrival", year=2016, runtime=116),
            make_movie(0, title="The Arrival", year=1996, runtime=115),
        ]

        result = runner.invoke(app, ["search", "Synology", "arrival"])

        assert result.exit_code == 0, result.output
        assert "The Arrival" in result.output
        assert "1h 56m" in result.output
        api.lookup_movies.assert_awaited_once()

    def test_no_results(self, mock_container, api) -> None:
        api.lookup_movies.return_value = []

        result = runner.invoke(app, ["search", "Synology", "zzz"])

        assert result.exit_code == 0
        assert "Aucun resultat" in result.output


# ============================================================================
# monitor-episodes / automatic-search
# ============================================================================


class TestMutationCommands:
    def test_unmonitor_episodes(self, mock_container, api, sonarr_instance) -> None:
        result = runner.invoke(
            app, ["monitor-episodes", "Synology TV", "101", "102", "--unmonitor"]
        )

        assert result.exit_code == 0, result.output
        assert "desactivee" in result.output
        api.monitor_episodes.assert_awaited_once_with([101, 102], False, sonarr_instance)

    def test_monitor_failure(self, mock_container, api) -> None:
        request = httpx.Request("PUT", "http://10.0.1.5:8989/api/v3/episode/monitor")
        api.monitor_episodes.side_effect = httpx.HTTPStatusError(
            "error", request=request, response=httpx.Response(401, request=request)
        )

        result = runner.invoke(app, ["monitor-episodes", "Synology TV", "101"])

        assert result.exit_code == 1
        assert "API key" in result.output

    def test_automatic_search(self, mock_container, api, radarr_instance) -> None:
        api.fetch_movies.return_value = [make_movie(1, title="Dune", year=2021)]

        result = runner.invoke(app, ["automatic-search", "Synology", "1"])

        assert result.exit_code == 0, result.output
        assert "Recherche lancee" in result.output
        api.command.assert_awaited_once_with(radarr_instance, CommandKind.AUTOMATIC_SEARCH, [1])

    def test_automatic_search_unknown_movie(self, mock_container, api) -> None:
        api.fetch_movies.return_value = [make_movie(1)]

        result = runner.invoke(app, ["automatic-search", "Synology", "5"])

        assert result.exit_code == 1
        api.command.assert_not_awaited()


# ============================================================================
# releases
# ============================================================================


class TestReleasesCommand:
    def test_lists_releases(self, mock_container, api, radarr_instance) -> None:
        api.fetch_releases.return_value = [
            make_release("a", 1, title="Dune.2160p", seeders=80, indexer="TL", age_minutes=120),
            make_release("b", 1, title="Dune.720p", rejected=True, protocol="usenet", indexer="NG"),
        ]

        result = runner.invoke(app, ["releases", "Synology", "1"])

        assert result.exit_code == 0, result.output
        assert "Dune.2160p" in result.output
        assert "Dune.720p" in result.output
        assert "Total: 2 releases" in result.output
        api.fetch_releases.assert_awaited_once_with(1, radarr_instance)

    def test_approved_only(self, mock_container, api) -> None:
        api.fetch_releases.return_value = [
            make_release("a", 1, title="Dune.2160p", indexer="TL", age_minutes=120),
            make_release("b", 1, title="Dune.720p", rejected=True),
        ]

        result = runner.invoke(app, ["releases", "Synology", "1", "--approved"])

        assert result.exit_code == 0, result.output
        assert "Dune.720p" not in result.output
        assert "Total: 1 releases" in result.output

    def test_search_failure(self, mock_container, api) -> None:
        api.fetch_releases.side_effect = httpx.ReadTimeout("timed out")

        result = runner.invoke(app, ["releases", "Synology", "1"])

        assert result.exit_code == 1
        assert "Server Not Reachable" in result.output


# ============================================================================
# validate / version
# ============================================================================


class TestValidateCommand:
    def test_valid(self, mock_container, api) -> None:
        api.system_status.return_value = InstanceStatus(app_name="Radarr", version="5.2.6")

        result = runner.invoke(app, ["validate", "Synology"])

        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "5.2.6" in result.output

    def test_wrong_app(self, mock_container, api) -> None:
        api.system_status.return_value = InstanceStatus(app_name="Sonarr")

        result = runner.invoke(app, ["validate", "Synology"])

        assert result.exit_code == 1
        assert "Wrong Instance Type" in result.output


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "arrsync v0.1.0" in result.output


def test_info(monkeypatch) -> None:
    monkeypatch.setenv(
        "ARRSYNC_INSTANCES",
        '[{"id": "r1", "label": "Synology", "type": "Radarr", '
        '"url": "http://10.0.1.5:7878", "api_key": "k"}]',
    )
    with patch("arrsync.main.get_config", return_value=Settings(_env_file=None)):
        result = runner.invoke(app, ["info"])

    assert result.exit_code == 0, result.output
    assert "Instances : 1" in result.output
    assert "Instance films : Synology" in result.output
