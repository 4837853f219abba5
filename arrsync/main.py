"""
Point d'entrée CLI d'arrsync.

Assemble le container, branche loguru et enregistre les commandes typer.
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import (
    automatic_search,
    episodes,
    monitor_episodes,
    movies,
    releases,
    search,
    validate,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="arrsync",
    help="Synchronisation avec des serveurs Radarr et Sonarr",
)
container = Container()


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="N'afficher que les erreurs"),
    ] = False,
) -> None:
    """arrsync - Films et series de vos serveurs Radarr/Sonarr."""
    if quiet:
        _setup_logging("ERROR")
    elif verbose:
        _setup_logging("DEBUG")


app.command()(validate)
app.command()(movies)
app.command()(episodes)
app.command()(search)
app.command(name="monitor-episodes")(monitor_episodes)
app.command(name="automatic-search")(automatic_search)
app.command()(releases)


def _setup_logging(level: str | None = None) -> None:
    """Configure loguru depuis les parametres, avec un niveau console optionnel."""
    settings = container.config()
    configure_logging(
        log_level=level or settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )


def get_config() -> Settings:
    """Settings partages par le container."""
    return container.config()


@app.command()
def info() -> None:
    """Resume les instances configurees et les reglages actifs."""
    config = get_config()
    logger.info("Configuration arrsync")
    typer.echo(f"Instances : {len(config.instances)}")
    for entry in config.instances:
        typer.echo(f"  - {entry.label} ({entry.type.value}) : {entry.url}")
    selected = config.selected_movie_instance
    typer.echo(f"Instance films : {selected.label if selected else 'aucune'}")
    typer.echo(f"Timeout API : {config.request_timeout}s")
    typer.echo(f"Debounce recherche : {config.search_debounce_seconds}s")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Version installee."""
    typer.echo(f"arrsync v{__version__}")


def main() -> None:
    """Entree du script console arrsync."""
    _setup_logging()

    logger.info("Démarrage d'arrsync", version=__version__)

    app()


if __name__ == "__main__":
    main()
