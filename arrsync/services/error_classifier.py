"""
Classification des echecs du client API dans la taxonomie fermee.

classify_error() est pure et sans effet de bord : elle recoit n'importe
quelle exception levee a la frontiere du client API et retourne le membre
de la taxonomie correspondant (voir core/value_objects/api_error.py).

L'annulation est toujours testee en premier : un store ne doit jamais
l'enregistrer comme erreur visible.
"""

import asyncio
import json

import httpx

from arrsync.core.value_objects import (
    APIError,
    BadStatus,
    Cancelled,
    DecodingFailed,
    NetworkUnreachable,
    RateLimitError,
    Unknown,
)


def is_cancellation(error: BaseException) -> bool:
    """Indique si l'echec correspond a une annulation de la requete."""
    if isinstance(error, asyncio.CancelledError):
        return True
    return isinstance(error, APIError) and error.is_cancellation


def _detail(error: BaseException) -> str:
    return str(error) or type(error).__name__


def classify_error(error: BaseException) -> APIError:
    """
    Ramene un echec quelconque a la taxonomie fermee.

    Args:
        error: Exception levee par le client API (ou pendant l'attente)

    Returns:
        Cancelled, NetworkUnreachable, BadStatus, DecodingFailed ou Unknown
    """
    if isinstance(error, asyncio.CancelledError):
        return Cancelled()
    if isinstance(error, APIError):
        return error
    if isinstance(error, RateLimitError):
        return BadStatus(429)
    if isinstance(error, httpx.HTTPStatusError):
        return BadStatus(error.response.status_code)
    # Corps compresse illisible : la reponse est arrivee mais ne peut etre lue
    if isinstance(error, httpx.DecodingError):
        return DecodingFailed(_detail(error))
    # Boucle de redirections ou URL d'instance inutilisable : serveur injoignable
    if isinstance(error, (httpx.TransportError, httpx.TooManyRedirects, httpx.InvalidURL)):
        return NetworkUnreachable(_detail(error))
    if isinstance(error, json.JSONDecodeError):
        return DecodingFailed(f"invalid JSON: {error.msg}")
    if isinstance(error, OSError):
        return NetworkUnreachable(_detail(error))
    return Unknown(f"{type(error).__name__}: {error}")
