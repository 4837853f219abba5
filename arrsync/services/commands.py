"""
Dispatch des commandes de mutation (surveillance, commandes serveur).

Le dispatcher partage l'etat du store qui le possede : il positionne son
indicateur d'occupation (busy_indicator) et enregistre ses erreurs.

Limites connues :
- L'indicateur d'occupation est un ID unique : pour un lot, seul le premier
  ID est marque alors que tout le lot est modifie.
- Les appels ne sont pas serialises : deux commandes peuvent etre en cours
  en meme temps, l'indicateur reflete la derniere demarree et est efface
  par la premiere qui se termine.
- Aucune mise a jour optimiste : les entites locales sont rafraichies par
  un fetch ulterieur.
"""

import asyncio
from typing import Any, Awaitable, Callable, Sequence

from loguru import logger

from arrsync.core.entities import Instance
from arrsync.core.ports.api_clients import CommandKind
from arrsync.services.entity_store import EntityStore
from arrsync.services.error_classifier import classify_error, is_cancellation

MonitorCall = Callable[[Sequence[int], bool, Instance], Awaitable[Any]]
CommandCall = Callable[[Instance, CommandKind, Sequence[int]], Awaitable[Any]]


class CommandDispatcher:
    """
    Execute les commandes de mutation pour le compte d'un store.

    Example:
        dispatcher = CommandDispatcher(store)
        ok = await dispatcher.monitor([12, 13], True, api.monitor_episodes)
    """

    def __init__(self, store: EntityStore) -> None:
        self._store = store

    async def monitor(
        self, ids: Sequence[int], monitored: bool, mutate: MonitorCall
    ) -> bool:
        """
        Active ou desactive la surveillance d'un lot d'entites.

        Args:
            ids: IDs des entites a modifier (le premier sert d'indicateur)
            monitored: Nouvel etat de surveillance
            mutate: Appel du client API a utiliser

        Returns:
            True si le serveur a accepte la modification
        """
        if not ids:
            raise ValueError("monitor() requires at least one id")
        return await self._dispatch(
            ids[0],
            lambda: mutate(list(ids), monitored, self._store.instance),
            "Monitor failed",
        )

    async def command(self, entity: Any, kind: CommandKind, send: CommandCall) -> bool:
        """
        Declenche une commande serveur pour une entite (fire-and-forget).

        La collection locale n'est pas modifiee ; l'appelant affiche
        l'eventuel accuse de reception (toast).
        """
        return await self._dispatch(
            entity.id,
            lambda: send(self._store.instance, kind, [entity.id]),
            "Command failed",
        )

    async def _dispatch(
        self, busy_id: int, call: Callable[[], Awaitable[Any]], failure_message: str
    ) -> bool:
        store = self._store
        store.error = None
        store.busy_indicator = busy_id
        store._notify()

        try:
            await call()
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            logger.debug("Commande annulee", category=store.category)
            return False
        except Exception as e:
            if is_cancellation(e):
                return False
            store._record_error(classify_error(e), failure_message)
            return False
        finally:
            store.busy_indicator = None
            store._notify()

        return True
