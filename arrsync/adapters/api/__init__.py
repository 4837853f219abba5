"""
Client API pour les serveurs Radarr et Sonarr.

- ArrAPIClient: implementation httpx de IArrAPIClient
- with_retry / request_with_retry: relance sur HTTP 429 (RateLimitError)
- decoders: conversion des reponses JSON en entites du domaine
"""

from arrsync.adapters.api.arr_client import ArrAPIClient
from arrsync.adapters.api.retry import request_with_retry, with_retry

__all__ = [
    "ArrAPIClient",
    "request_with_retry",
    "with_retry",
]
