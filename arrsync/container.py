"""
Container d'injection de dependances via dependency-injector.

Fournit le client API partage et les fabriques de contextes d'instance
pour la CLI.
"""

from dependency_injector import containers, providers

from .adapters.api.arr_client import ArrAPIClient
from .config import Settings
from .services.instance_context import InstanceContext
from .services.instance_validator import InstanceValidator


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        context = container.instance_context(instance=instance)
        await context.movies.fetch()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Client API - Singleton partage par toutes les instances et tous les stores
    api_client = providers.Singleton(
        ArrAPIClient,
        timeout=config.provided.request_timeout,
        max_attempts=config.provided.max_rate_limit_attempts,
    )

    # Contexte d'instance - Factory : un contexte neuf (stores vides) par selection
    # Utiliser: container.instance_context(instance=instance)
    instance_context = providers.Factory(
        InstanceContext,
        api=api_client,
        debounce_window=config.provided.search_debounce_seconds,
        freshness_window=config.provided.freshness_window_seconds,
    )

    instance_validator = providers.Factory(
        InstanceValidator,
        api=api_client,
    )
