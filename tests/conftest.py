"""
Fixtures pytest partagees pour les tests arrsync.

Ce module contient les fixtures communes utilisees dans les tests:
- Instances Radarr/Sonarr de test
- Mock du port IArrAPIClient
- Horloge fixe pour les regles de fraicheur

Les fabriques d'entites sont dans tests/fixtures/factories.py.
"""

from unittest.mock import AsyncMock

import pytest

from arrsync.core.entities import Instance, InstanceType
from arrsync.core.ports.api_clients import IArrAPIClient
from tests.fixtures.factories import NOW


@pytest.fixture
def radarr_instance() -> Instance:
    """Instance Radarr de test."""
    return Instance(
        id="radarr-1",
        type=InstanceType.RADARR,
        label="Synology",
        url="http://10.0.1.5:7878",
        api_key="8f45bce99e254f888b7a2ba122468dbe",
    )


@pytest.fixture
def sonarr_instance() -> Instance:
    """Instance Sonarr de test."""
    return Instance(
        id="sonarr-1",
        type=InstanceType.SONARR,
        label="Synology TV",
        url="http://10.0.1.5:8989",
        api_key="f8e3682b3b984cddbaa00047a09d0fbd",
    )


@pytest.fixture
def mock_api() -> AsyncMock:
    """
    Mock de IArrAPIClient pour les tests.

    Toutes les methodes sont des AsyncMock ; les valeurs de retour doivent
    etre configurees dans chaque test.
    """
    return AsyncMock(spec=IArrAPIClient)


@pytest.fixture
def clock():
    """Horloge fixe (NOW) injectee dans les stores."""
    return lambda: NOW
