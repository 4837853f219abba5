"""
Taxonomie fermee des erreurs d'appel aux API Radarr/Sonarr.

Toute erreur levee a la frontiere du client API est ramenee a l'un des
membres suivants par le classifieur (services/error_classifier.py) :

- Cancelled : requete annulee (jamais affichee a l'utilisateur)
- NetworkUnreachable : serveur injoignable (connexion, timeout)
- BadStatus : reponse HTTP hors 2xx
- DecodingFailed : reponse illisible (JSON invalide, champ manquant)
- Unknown : tout le reste

Les erreurs sont comparables par valeur : BadStatus(500) == BadStatus(500).
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Categorie d'une erreur API classifiee."""

    CANCELLED = "cancelled"
    NETWORK_UNREACHABLE = "network_unreachable"
    BAD_STATUS = "bad_status"
    DECODING_FAILED = "decoding_failed"
    UNKNOWN = "unknown"


class APIError(Exception):
    """Classe de base des erreurs API classifiees."""

    kind: ErrorKind = ErrorKind.UNKNOWN
    description: str = "Something Went Wrong"

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(detail or self.description)

    @property
    def recovery_suggestion(self) -> str:
        """Suggestion de correction affichee sous le message d'erreur."""
        return "Try again later."

    @property
    def is_cancellation(self) -> bool:
        return self.kind is ErrorKind.CANCELLED

    def _identity(self) -> tuple:
        return (type(self), self.detail)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, APIError):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        if self.detail is None:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}({self.detail!r})"


class Cancelled(APIError):
    """Requete annulee (navigation, requete remplacee)."""

    kind = ErrorKind.CANCELLED
    description = "Request Cancelled"


class NetworkUnreachable(APIError):
    """Le serveur n'a pas pu etre contacte."""

    kind = ErrorKind.NETWORK_UNREACHABLE
    description = "Server Not Reachable"

    @property
    def recovery_suggestion(self) -> str:
        return "Check the instance URL and your network connection."


class BadStatus(APIError):
    """
    Reponse HTTP avec un code de statut hors 2xx.

    Attributes:
        code: Code de statut HTTP renvoye par le serveur
    """

    kind = ErrorKind.BAD_STATUS
    description = "Invalid Status Code"

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"HTTP {code}")

    @property
    def recovery_suggestion(self) -> str:
        if self.code in (401, 403):
            return "Check the API key of the instance."
        if self.code == 404:
            return "The requested item no longer exists on the server."
        if self.code >= 500:
            return f"The server returned status {self.code}. Try again later."
        return f"URL returned status {self.code}."

    def _identity(self) -> tuple:
        return (type(self), self.code)

    def __repr__(self) -> str:
        return f"BadStatus({self.code})"


class DecodingFailed(APIError):
    """La reponse du serveur ne correspond pas au format attendu."""

    kind = ErrorKind.DECODING_FAILED
    description = "Invalid Server Response"

    @property
    def recovery_suggestion(self) -> str:
        return "The server response could not be read. Make sure the instance is up to date."


class Unknown(APIError):
    """Erreur non classifiee."""

    kind = ErrorKind.UNKNOWN


class RateLimitError(Exception):
    """
    Le serveur a repondu 429 Too Many Requests.

    Levee par l'adaptateur HTTP, relancee par lui tant qu'il lui reste des
    tentatives, puis classifiee en BadStatus(429). Ce n'est pas un membre
    de la taxonomie.

    Attributes:
        retry_after: Delai annonce par le header Retry-After, en secondes
                     (None s'il est absent ou donne sous forme de date)
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")
