"""
Commandes CLI d'arrsync.

Chaque commande cree un contexte d'instance neuf, execute les operations
des stores puis affiche le resultat avec Rich. Les erreurs classifiees sont
affichees avec leur suggestion de correction (code de sortie 1).
"""

import asyncio
from typing import Annotated, Optional

import typer
from rich.table import Table

from arrsync.adapters.cli.helpers import (
    console,
    exit_on_store_error,
    print_api_error,
    resolve_instance,
    with_container,
)
from arrsync.core.entities import InstanceType, PeerHealth
from arrsync.core.ports.api_clients import CommandKind
from arrsync.services.instance_validator import ValidationError


def validate(
    label: Annotated[str, typer.Argument(help="Label ou id de l'instance")],
) -> None:
    """Verifie qu'une instance configuree repond avec le bon type de serveur."""
    asyncio.run(_validate_async(label))


@with_container
async def _validate_async(container, label: str) -> None:
    """Implementation async de la commande validate."""
    instance = resolve_instance(container.config(), label)
    validator = container.instance_validator()
    try:
        instance, status = await validator.validate(instance)
    except ValidationError as e:
        console.print(f"[bold red]{e.description}[/bold red]")
        console.print(e.recovery_suggestion)
        raise typer.Exit(code=1)

    version = status.version if status and status.version else "?"
    console.print(
        f"[green]OK[/green] {instance.label} ({instance.url}) - {instance.type.value} {version}"
    )


def movies(
    label: Annotated[str, typer.Argument(help="Label ou id de l'instance Radarr")],
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Nombre maximum de films affiches"),
    ] = None,
) -> None:
    """Liste les films d'une instance Radarr."""
    asyncio.run(_movies_async(label, limit))


@with_container
async def _movies_async(container, label: str, limit: Optional[int]) -> None:
    """Implementation async de la commande movies."""
    instance = resolve_instance(container.config(), label, InstanceType.RADARR)
    context = container.instance_context(instance=instance)
    try:
        await context.movies.fetch()
        exit_on_store_error(context.movies)
        await context.quality_profiles.maybe_fetch()

        table = Table(title=f"Films - {instance.label}")
        table.add_column("ID", justify="right")
        table.add_column("Titre")
        table.add_column("Annee", justify="right")
        table.add_column("Statut")
        table.add_column("Profil")
        table.add_column("Surveille")
        table.add_column("Taille", justify="right")

        items = context.movies.items if limit is None else context.movies.items[:limit]
        for movie in items:
            table.add_row(
                str(movie.id),
                movie.title,
                str(movie.year),
                movie.status.label,
                context.quality_profile_name(movie.quality_profile_id),
                "oui" if movie.monitored else "non",
                movie.human_size if movie.is_downloaded else "-",
            )
        console.print(table)
        console.print(f"Total: {len(context.movies.items)} films")
    finally:
        context.close()


def episodes(
    label: Annotated[str, typer.Argument(help="Label ou id de l'instance Sonarr")],
    series_id: Annotated[int, typer.Argument(help="ID Sonarr de la serie")],
    season: Annotated[
        Optional[int],
        typer.Option("--season", "-s", help="Filtrer sur une saison"),
    ] = None,
) -> None:
    """Liste les episodes d'une serie Sonarr."""
    asyncio.run(_episodes_async(label, series_id, season))


@with_container
async def _episodes_async(container, label: str, series_id: int, season: Optional[int]) -> None:
    """Implementation async de la commande episodes."""
    instance = resolve_instance(container.config(), label, InstanceType.SONARR)
    context = container.instance_context(instance=instance)
    try:
        await context.series.fetch()
        exit_on_store_error(context.series)
        series = context.series.by_id(series_id)
        if series is None:
            console.print(f"[red]Serie introuvable :[/red] {series_id}")
            raise typer.Exit(code=1)

        await context.episodes.maybe_fetch(series)
        exit_on_store_error(context.episodes)

        items = (
            context.episodes.by_season_id(season)
            if season is not None
            else context.episodes.by_parent_id(series.id)
        )
        table = Table(title=series.title)
        table.add_column("ID", justify="right")
        table.add_column("Episode")
        table.add_column("Titre")
        table.add_column("Diffusion")
        table.add_column("Surveille")
        table.add_column("Fichier")
        for episode in items:
            table.add_row(
                str(episode.id),
                episode.episode_label,
                episode.title or "TBA",
                episode.air_date_utc.strftime("%Y-%m-%d") if episode.air_date_utc else "-",
                "oui" if episode.monitored else "non",
                "oui" if episode.has_file else "non",
            )
        console.print(table)
    finally:
        context.close()


def search(
    label: Annotated[str, typer.Argument(help="Label ou id de l'instance Radarr")],
    query: Annotated[str, typer.Argument(help="Titre recherche")],
) -> None:
    """Recherche des films a ajouter sur une instance Radarr."""
    asyncio.run(_search_async(label, query))


@with_container
async def _search_async(container, label: str, query: str) -> None:
    """Implementation async de la commande search."""
    instance = resolve_instance(container.config(), label, InstanceType.RADARR)
    context = container.instance_context(instance=instance)
    try:
        context.search.update(query)
        await context.search.drain()
        exit_on_store_error(context.lookup)

        if not context.lookup.items:
            console.print(f"Aucun resultat pour : {query}")
            return

        table = Table(title=f"Recherche : {query}")
        table.add_column("Titre")
        table.add_column("Annee", justify="right")
        table.add_column("Duree", justify="right")
        table.add_column("Deja ajoute")
        for movie in context.lookup.items:
            table.add_row(
                movie.title,
                str(movie.year),
                movie.human_runtime,
                "oui" if movie.exists else "non",
            )
        console.print(table)
    finally:
        context.close()


def monitor_episodes(
    label: Annotated[str, typer.Argument(help="Label ou id de l'instance Sonarr")],
    ids: Annotated[list[int], typer.Argument(help="IDs des episodes")],
    unmonitor: Annotated[
        bool,
        typer.Option("--unmonitor", help="Desactiver la surveillance"),
    ] = False,
) -> None:
    """Active (ou desactive) la surveillance d'episodes."""
    asyncio.run(_monitor_episodes_async(label, ids, unmonitor))


@with_container
async def _monitor_episodes_async(container, label: str, ids: list[int], unmonitor: bool) -> None:
    """Implementation async de la commande monitor-episodes."""
    instance = resolve_instance(container.config(), label, InstanceType.SONARR)
    context = container.instance_context(instance=instance)
    try:
        if not await context.episodes.monitor(ids, not unmonitor):
            if context.episodes.error is not None:
                print_api_error(context.episodes.error)
            raise typer.Exit(code=1)
        state = "desactivee" if unmonitor else "activee"
        console.print(f"[green]Surveillance {state}[/green] pour {len(ids)} episode(s)")
    finally:
        context.close()


def automatic_search(
    label: Annotated[str, typer.Argument(help="Label ou id de l'instance Radarr")],
    movie_id: Annotated[int, typer.Argument(help="ID Radarr du film")],
) -> None:
    """Declenche une recherche automatique de releases pour un film."""
    asyncio.run(_automatic_search_async(label, movie_id))


@with_container
async def _automatic_search_async(container, label: str, movie_id: int) -> None:
    """Implementation async de la commande automatic-search."""
    instance = resolve_instance(container.config(), label, InstanceType.RADARR)
    context = container.instance_context(instance=instance)
    try:
        await context.movies.maybe_fetch()
        exit_on_store_error(context.movies)
        movie = context.movies.by_id(movie_id)
        if movie is None:
            console.print(f"[red]Film introuvable :[/red] {movie_id}")
            raise typer.Exit(code=1)

        if not await context.movies.command(movie, CommandKind.AUTOMATIC_SEARCH):
            if context.movies.error is not None:
                print_api_error(context.movies.error)
            raise typer.Exit(code=1)
        console.print(f"[green]Recherche lancee[/green] pour {movie.title} ({movie.year})")
    finally:
        context.close()


# Couleur du nombre de seeders, comme dans la liste des releases de l'app
_PEER_STYLES = {
    PeerHealth.HIGH: "green",
    PeerHealth.MEDIUM: "blue",
    PeerHealth.LOW: "yellow",
    PeerHealth.NONE: "red",
}


def releases(
    label: Annotated[str, typer.Argument(help="Label ou id de l'instance Radarr")],
    movie_id: Annotated[int, typer.Argument(help="ID Radarr du film")],
    approved_only: Annotated[
        bool,
        typer.Option("--approved", help="Masquer les releases rejetees"),
    ] = False,
) -> None:
    """Recherche interactive : liste les releases disponibles pour un film."""
    asyncio.run(_releases_async(label, movie_id, approved_only))


@with_container
async def _releases_async(container, label: str, movie_id: int, approved_only: bool) -> None:
    """Implementation async de la commande releases."""
    instance = resolve_instance(container.config(), label, InstanceType.RADARR)
    context = container.instance_context(instance=instance)
    try:
        await context.releases.fetch(movie_id)
        exit_on_store_error(context.releases)

        items = context.releases.approved() if approved_only else context.releases.items
        if not items:
            console.print(f"Aucune release pour le film {movie_id}")
            return

        table = Table(title=f"Releases - film {movie_id}")
        table.add_column("Titre")
        table.add_column("Qualite")
        table.add_column("Taille", justify="right")
        table.add_column("Age", justify="right")
        table.add_column("Type")
        table.add_column("Indexeur")
        table.add_column("")
        for release in items:
            marker = "rejetee" if release.rejected else ", ".join(release.indexer_flags)
            type_cell = release.type_label
            if release.is_torrent:
                style = _PEER_STYLES[release.peer_health]
                type_cell = f"[{style}]{type_cell}[/{style}]"
            table.add_row(
                release.title,
                release.quality_label,
                release.size_label,
                release.age_label,
                type_cell,
                release.indexer_label,
                marker,
            )
        console.print(table)
        console.print(f"Total: {len(items)} releases")
    finally:
        context.close()
