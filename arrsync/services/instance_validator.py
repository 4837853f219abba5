"""
Validation d'une instance avant son enregistrement.

Avant d'enregistrer une instance, l'URL est nettoyee (chemin, requete et
fragment supprimes, passage en minuscules) puis le serveur est interroge
via /api/v3/system/status. Le nom d'application renvoye doit correspondre
au type choisi (Radarr ou Sonarr).

Les echecs sont ramenes a ValidationError, dont chaque variante fournit
un titre et une suggestion de correction pour l'alerte du formulaire.
"""

from dataclasses import replace
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from loguru import logger

from arrsync.core.entities import Instance, InstanceStatus
from arrsync.core.ports.api_clients import IArrAPIClient
from arrsync.core.value_objects import BadStatus, DecodingFailed
from arrsync.services.error_classifier import classify_error, is_cancellation


class ValidationError(Exception):
    """Base des erreurs de validation d'instance."""

    description: str = "Invalid Instance"

    @property
    def recovery_suggestion(self) -> str:
        return "Try again later."


class UrlNotValid(ValidationError):
    description = "Invalid URL"

    @property
    def recovery_suggestion(self) -> str:
        return "Enter a valid URL."


class UrlNotReachable(ValidationError):
    description = "URL Not Reachable"

    def __init__(self, error: Exception) -> None:
        self.error = error
        super().__init__(str(error))

    @property
    def recovery_suggestion(self) -> str:
        return str(self.error) or "The server could not be reached."


class BadStatusCode(ValidationError):
    description = "Invalid Status Code"

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(f"HTTP {code}")

    @property
    def recovery_suggestion(self) -> str:
        return f"URL returned status {self.code}."


class BadResponse(ValidationError):
    description = "Invalid Server Response"

    def __init__(self, error: Exception) -> None:
        self.error = error
        super().__init__(str(error))

    @property
    def recovery_suggestion(self) -> str:
        return str(self.error)


class BadAppName(ValidationError):
    description = "Wrong Instance Type"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    @property
    def recovery_suggestion(self) -> str:
        return f"URL returned a {self.name} instance."


def sanitize_instance_url(url: str) -> str:
    """
    Supprime chemin, requete et fragment d'une URL et la passe en minuscules.

    Example:
        >>> sanitize_instance_url("HTTP://10.0.1.5:8310/api")
        'http://10.0.1.5:8310'
    """
    parts = urlsplit(url.strip())
    if parts.scheme and parts.netloc:
        url = urlunsplit((parts.scheme, parts.netloc, "", "", ""))
    return url.lower()


def _check_url(url: str) -> None:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise UrlNotValid(url)


class InstanceValidator:
    """
    Verifie qu'une instance saisie pointe vers le bon type de serveur.

    Example:
        validator = InstanceValidator(api)
        instance, status = await validator.validate(instance)
    """

    def __init__(self, api: IArrAPIClient) -> None:
        self._api = api

    async def validate(self, instance: Instance) -> tuple[Instance, Optional[InstanceStatus]]:
        """
        Nettoie l'URL de l'instance et interroge son statut systeme.

        Args:
            instance: Instance saisie par l'utilisateur

        Returns:
            Tuple (instance avec URL nettoyee, statut renvoye par le serveur)

        Raises:
            ValidationError: UrlNotValid, UrlNotReachable, BadStatusCode,
                             BadResponse ou BadAppName
        """
        instance = replace(instance, url=sanitize_instance_url(instance.url))
        _check_url(instance.url)

        try:
            status = await self._api.system_status(instance)
        except Exception as e:
            if is_cancellation(e):
                raise
            error = classify_error(e)
            logger.error(
                "Instance validation failed",
                category="instance.validation",
                error=repr(error),
            )
            if isinstance(error, BadStatus):
                raise BadStatusCode(error.code) from e
            if isinstance(error, DecodingFailed):
                raise BadResponse(error) from e
            raise UrlNotReachable(error) from e

        app_name = status.app_name if status else None
        if app_name and app_name.casefold() != instance.type.value.casefold():
            raise BadAppName(app_name)

        logger.info(
            "Instance validee",
            category="instance.validation",
            app=app_name,
            version=status.version if status else None,
        )
        return instance, status
