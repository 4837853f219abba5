"""
Tests pour le port IArrAPIClient et ses dataclasses (HistoryPage, CommandKind).
"""

import pytest

from arrsync.core.ports.api_clients import CommandKind, HistoryPage, IArrAPIClient


class TestIArrAPIClient:
    """Tests pour l'interface abstraite."""

    def test_cannot_instantiate_interface(self):
        with pytest.raises(TypeError):
            IArrAPIClient()  # type: ignore[abstract]

    def test_partial_implementation_is_rejected(self):
        class MoviesOnly(IArrAPIClient):
            async def fetch_movies(self, instance):
                return []

        with pytest.raises(TypeError):
            MoviesOnly()  # type: ignore[abstract]


class TestHistoryPage:
    def test_defaults(self):
        page = HistoryPage()
        assert page.records == []
        assert page.total_records == 0

    def test_records_not_shared(self):
        a = HistoryPage()
        a.records.append("x")
        assert HistoryPage().records == []


class TestCommandKind:
    def test_members(self):
        assert {kind.name for kind in CommandKind} == {"AUTOMATIC_SEARCH", "REFRESH"}
