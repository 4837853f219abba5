"""
Debounce de la recherche au fil de la saisie.

Machine a etats : IDLE -> PENDING -> SEARCHING -> (IDLE | SEARCHING)

- Chaque modification de la requete relance le minuteur (750 ms par defaut) ;
  seule la derniere modification de la fenetre declenche une recherche.
- Une nouvelle recherche annule celle encore en cours (voir LookupStore).
- Une requete vide repasse en IDLE, vide les resultats et l'erreur sans
  appel reseau.

update() doit etre appele depuis la boucle asyncio proprietaire du store.
"""

import asyncio
from enum import Enum
from typing import Optional

from loguru import logger

from arrsync.services.lookup import LookupStore
from arrsync.services.observable import ObservableState

DEFAULT_DEBOUNCE_WINDOW = 0.75


class SearchState(Enum):
    """Etat du debounce de recherche."""

    IDLE = "idle"
    PENDING = "pending"
    SEARCHING = "searching"


class SearchDebouncer(ObservableState):
    """
    Transforme un flux de saisies en recherches espacees et annulables.

    Example:
        debouncer = SearchDebouncer(lookup_store)
        for text in ("a", "ab", "abc"):
            debouncer.update(text)
        await debouncer.drain()  # une seule recherche, pour "abc"
    """

    def __init__(self, lookup: LookupStore, window: float = DEFAULT_DEBOUNCE_WINDOW) -> None:
        super().__init__()
        self.lookup = lookup
        self.window = window
        self.state = SearchState.IDLE
        self.query = ""

        self._timer: Optional[asyncio.Task] = None
        self._tasks: set[asyncio.Task] = set()
        self._searches_started = 0

    def update(self, query: str) -> None:
        """Enregistre une modification de la requete saisie."""
        self.query = query
        self._cancel_timer()

        if not query.strip():
            self.lookup.reset()
            self._set_state(SearchState.IDLE)
            return

        self._set_state(SearchState.PENDING)
        task = asyncio.get_running_loop().create_task(self._debounce(query))
        self._timer = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _debounce(self, query: str) -> None:
        await asyncio.sleep(self.window)
        self._timer = None

        self._searches_started += 1
        search_number = self._searches_started
        self._set_state(SearchState.SEARCHING)
        logger.debug("Recherche declenchee", category=self.lookup.category, query=query)

        await self.lookup.search(query)

        if search_number == self._searches_started and self.state is SearchState.SEARCHING:
            self._set_state(SearchState.IDLE)

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def _set_state(self, state: SearchState) -> None:
        if self.state is not state:
            self.state = state
            self._notify()

    async def drain(self) -> None:
        """Attend la fin du minuteur et des recherches en cours."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Annule le minuteur et les recherches lancees par ce debouncer."""
        for task in list(self._tasks):
            task.cancel()
        self._timer = None
        self.lookup.cancel()
        self._set_state(SearchState.IDLE)
