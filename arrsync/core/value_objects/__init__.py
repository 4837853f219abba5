"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- ErrorKind : Categorie d'une erreur API
- APIError : Base de la taxonomie fermee des erreurs API
- Cancelled, NetworkUnreachable, BadStatus, DecodingFailed, Unknown : membres de la taxonomie
- RateLimitError : reponse 429 levee par l'adaptateur HTTP avant classification
"""

from arrsync.core.value_objects.api_error import (
    APIError,
    BadStatus,
    Cancelled,
    DecodingFailed,
    ErrorKind,
    NetworkUnreachable,
    RateLimitError,
    Unknown,
)

__all__ = [
    "APIError",
    "BadStatus",
    "Cancelled",
    "DecodingFailed",
    "ErrorKind",
    "NetworkUnreachable",
    "RateLimitError",
    "Unknown",
]
