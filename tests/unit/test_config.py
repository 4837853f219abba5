"""
Tests unitaires pour la configuration pydantic-settings et le logging.

Verifie le chargement des instances depuis ARRSYNC_INSTANCES (JSON), les
valeurs par defaut, la selection de l'instance Radarr et les handlers loguru.
"""

import json
import sys
from pathlib import Path

import pytest
from loguru import logger

from arrsync.config import InstanceSettings, Settings
from arrsync.core.entities import InstanceType
from arrsync.logging_config import configure_logging

INSTANCES = [
    {"id": "r1", "label": "Synology", "type": "Radarr", "url": "http://10.0.1.5:7878", "api_key": "k1"},
    {"id": "s1", "label": "Synology TV", "type": "Sonarr", "url": "http://10.0.1.5:8989", "api_key": "k2"},
    {"id": "r2", "label": "Seedbox", "type": "Radarr", "url": "https://seed.example.com", "api_key": "k3"},
]


@pytest.fixture
def settings(monkeypatch) -> Settings:
    monkeypatch.setenv("ARRSYNC_INSTANCES", json.dumps(INSTANCES))
    return Settings(_env_file=None)


class TestDefaults:
    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("ARRSYNC_INSTANCES", raising=False)
        settings = Settings(_env_file=None)

        assert settings.instances == []
        assert settings.request_timeout == 30.0
        assert settings.max_rate_limit_attempts == 5
        assert settings.search_debounce_seconds == 0.75
        assert settings.freshness_window_seconds == 30.0
        assert settings.log_level == "INFO"
        assert settings.selected_movie_instance is None

    def test_env_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("ARRSYNC_LOG_LEVEL", "debug")
        monkeypatch.setenv("ARRSYNC_SEARCH_DEBOUNCE_SECONDS", "0.5")
        monkeypatch.setenv("ARRSYNC_LOG_FILE", "~/arrsync.log")

        settings = Settings(_env_file=None)

        assert settings.log_level == "DEBUG"
        assert settings.search_debounce_seconds == 0.5
        assert settings.log_file == Path("~/arrsync.log").expanduser()


class TestInstances:
    def test_instances_loaded_from_json(self, settings) -> None:
        assert [i.label for i in settings.instances] == ["Synology", "Synology TV", "Seedbox"]
        assert settings.instances[1].type is InstanceType.SONARR

    def test_find_instance_by_label_or_id(self, settings) -> None:
        assert settings.find_instance("synology tv").id == "s1"
        assert settings.find_instance("r2").label == "Seedbox"
        assert settings.find_instance("missing") is None

    def test_selected_movie_instance_defaults_to_first_radarr(self, settings) -> None:
        assert settings.selected_movie_instance.id == "r1"

    def test_selected_movie_instance(self, monkeypatch) -> None:
        monkeypatch.setenv("ARRSYNC_INSTANCES", json.dumps(INSTANCES))
        monkeypatch.setenv("ARRSYNC_MOVIE_INSTANCE", "r2")

        assert Settings(_env_file=None).selected_movie_instance.label == "Seedbox"

    def test_instance_id_generated(self) -> None:
        entry = InstanceSettings(label="NAS", url="http://nas:7878", api_key="k")
        assert entry.id
        assert entry.to_instance().type is InstanceType.RADARR

    def test_derived_id_is_stable_across_loads(self) -> None:
        """Un id derive est identique d'un chargement a l'autre."""
        first = InstanceSettings(label="NAS", url="http://nas:7878", api_key="k1")
        second = InstanceSettings(label="NAS", url="http://nas:7878/", api_key="k2")
        other = InstanceSettings(label="NAS", url="http://nas:7879", api_key="k1")

        assert first.id == second.id
        assert first.id != other.id

    def test_derived_id_selects_movie_instance(self, monkeypatch) -> None:
        """ARRSYNC_MOVIE_INSTANCE peut citer l'id derive d'une instance sans id."""
        entries = [
            {"label": "Synology", "type": "Radarr", "url": "http://10.0.1.5:7878", "api_key": "k1"},
            {"label": "Seedbox", "type": "Radarr", "url": "https://seed.example.com", "api_key": "k3"},
        ]
        monkeypatch.setenv("ARRSYNC_INSTANCES", json.dumps(entries))
        seedbox_id = Settings(_env_file=None).instances[1].id

        monkeypatch.setenv("ARRSYNC_MOVIE_INSTANCE", seedbox_id)

        assert Settings(_env_file=None).selected_movie_instance.label == "Seedbox"


class TestLoggingConfig:
    """configure_logging() installe les handlers console et fichier JSON."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        yield
        logger.remove()
        logger.add(sys.stderr)

    def test_creates_log_directory_and_writes_json(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "arrsync.log"

        configure_logging(log_level="WARNING", log_file=log_file)
        logger.error("Movies fetch failed", category="movies", error="BadStatus(500)")
        logger.complete()
        logger.remove()

        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert record["record"]["message"] == "Movies fetch failed"
        assert record["record"]["extra"]["category"] == "movies"
