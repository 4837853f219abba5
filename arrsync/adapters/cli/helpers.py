"""
Utilitaires partages pour les commandes CLI d'arrsync.

Ce module fournit :
- with_container : decorateur injectant un container et fermant le client API
- console : instance Rich Console partagee
- resolve_instance : recherche d'une instance configuree par label ou id
- exit_on_store_error : affiche l'erreur classifiee d'un store et quitte
"""

from functools import wraps
from typing import Optional

import typer
from rich.console import Console

from arrsync.config import Settings
from arrsync.container import Container
from arrsync.core.entities import Instance, InstanceType
from arrsync.core.value_objects import APIError
from arrsync.services.entity_store import EntityStore

console = Console()


def with_container(func):
    """
    Decorateur qui injecte un container en premier argument.

    Le client API partage est ferme a la fin de la commande.

    Usage:
        @with_container
        async def my_command(container, ...):
            config = container.config()
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        container = Container()
        try:
            return await func(container, *args, **kwargs)
        finally:
            await container.api_client().close()

    return wrapper


def resolve_instance(
    config: Settings, label: str, expected: Optional[InstanceType] = None
) -> Instance:
    """
    Retrouve une instance configuree, ou quitte avec le code 1.

    Args:
        config: Parametres de l'application
        label: Label ou id de l'instance
        expected: Type d'instance requis par la commande (optionnel)
    """
    instance = config.find_instance(label)
    if instance is None:
        console.print(f"[red]Instance inconnue :[/red] {label}")
        raise typer.Exit(code=1)
    if expected is not None and instance.type is not expected:
        console.print(
            f"[red]{instance.label} est une instance {instance.type.value}, "
            f"{expected.value} attendu.[/red]"
        )
        raise typer.Exit(code=1)
    return instance


def print_api_error(error: APIError) -> None:
    console.print(f"[bold red]{error.description}[/bold red]")
    console.print(error.recovery_suggestion)


def exit_on_store_error(store: EntityStore) -> None:
    """Affiche l'erreur classifiee d'un store et quitte avec le code 1."""
    if store.error is not None:
        print_api_error(store.error)
        raise typer.Exit(code=1)
