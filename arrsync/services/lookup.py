"""
Store des resultats de recherche de films (lookup Radarr).

Chaque recherche annule la precedente encore en cours ; le numero de
generation du store garantit qu'un resultat perime n'ecrase jamais celui
d'une recherche plus recente.
"""

from arrsync.core.entities import Movie
from arrsync.services.entity_store import EntityStore


class LookupStore(EntityStore[Movie]):
    """
    Resultats de recherche de films a ajouter.

    Attributes:
        query: Requete dont les resultats sont (ou vont etre) affiches
    """

    category = "movies.lookup"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.query = ""

    @property
    def is_searching(self) -> bool:
        return self.is_fetching

    async def search(self, query: str) -> bool:
        """
        Lance une recherche ; une requete vide remet le store a zero.

        Returns:
            True si les resultats de cette recherche ont ete appliques
        """
        if not query.strip():
            self.reset()
            return False

        self.query = query
        return await self._run_fetch(
            lambda: self._api.lookup_movies(query, self.instance),
            "Movie lookup failed",
        )

    def reset(self) -> None:
        """Vide les resultats et l'erreur sans appel reseau."""
        self.query = ""
        self.clear()
