"""
Relance des requetes refusees pour limite de debit (HTTP 429).

Radarr et Sonarr (ou un reverse proxy devant eux) peuvent repondre 429 ;
seule cette reponse est relancee, avec un backoff exponentiel aleatoire.
Les autres statuts et les erreurs de transport remontent au premier echec :
les stores ne relancent rien eux-memes.

Usage:
    response = await request_with_retry(client, "GET", "/movie", max_attempts=3)
"""

from typing import Optional

import httpx
from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from arrsync.core.value_objects import RateLimitError


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _log_before_sleep(state: RetryCallState) -> None:
    logger.warning(
        "Requete limitee en debit, nouvelle tentative",
        attempt=state.attempt_number,
        wait=round(state.next_action.sleep, 2) if state.next_action else None,
    )


def with_retry(max_attempts: int = 5, max_wait: int = 60):
    """
    Decorateur tenacity : relance une coroutine tant qu'elle leve RateLimitError.

    Apres max_attempts tentatives, la derniere RateLimitError est relevee
    telle quelle (le classifieur la traduit en BadStatus(429)).
    """
    return retry(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        before_sleep=_log_before_sleep,
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 5,
    **kwargs,
) -> httpx.Response:
    """
    Envoie une requete et la rejoue sur 429.

    Args:
        client: Client httpx de l'instance visee
        method: Verbe HTTP
        url: Chemin relatif a la base_url du client, ou URL absolue
        max_attempts: Tentatives maximum, premiere incluse
        **kwargs: Transmis a client.request() (params, json...)

    Returns:
        La reponse, toujours 2xx

    Raises:
        RateLimitError: 429 a chaque tentative
        httpx.HTTPStatusError: Tout autre statut hors 2xx
        httpx.TransportError: Serveur injoignable, timeout
    """

    @with_retry(max_attempts=max_attempts)
    async def send() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            raise RateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
        response.raise_for_status()
        return response

    return await send()
