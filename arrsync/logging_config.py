"""
Logging d'arrsync avec loguru.

Deux destinations :
- stderr, colore, avec la categorie du store a l'origine du message
- un fichier JSON tournant, qui recoit tout a partir de DEBUG (appels API inclus)

Les stores journalisent leurs echecs avec l'extra "category" (movies,
series.episodes, series.episodes.history, movies.lookup, movies.releases...) ; une valeur
par defaut est posee pour les messages emis hors d'un store.
"""

import sys
from pathlib import Path

from loguru import logger

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> "
    "<level>{level: <8}</level> "
    "<magenta>[{extra[category]}]</magenta> "
    "<level>{message}</level> "
    "<dim>({name}:{line})</dim>"
)


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/arrsync.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Remplace les handlers loguru par ceux de l'application.

    Args:
        log_level: Niveau minimum affiche sur stderr
        log_file: Fichier JSON (son repertoire est cree si besoin)
        rotation_size: Taille declenchant la rotation du fichier
        retention_count: Nombre d'archives conservees
    """
    logger.remove()
    logger.configure(extra={"category": "-"})

    logger.add(sys.stderr, level=log_level, format=_CONSOLE_FORMAT, colorize=True)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configure", log_file=str(log_file), console_level=log_level)
