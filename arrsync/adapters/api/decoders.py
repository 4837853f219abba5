"""
Decodage des reponses JSON Radarr/Sonarr en entites du domaine.

Chaque decodeur recoit un dict issu de response.json() et l'identifiant de
l'instance d'origine. Un champ obligatoire manquant ou de mauvais type leve
DecodingFailed, que le classifieur transmet tel quel aux stores.
"""

from datetime import datetime
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from arrsync.core.entities import (
    Episode,
    InstanceStatus,
    MediaHistoryEvent,
    Movie,
    MovieFile,
    MovieImage,
    MovieRelease,
    MovieStatus,
    QualityProfile,
    Series,
)
from arrsync.core.ports.api_clients import HistoryPage
from arrsync.core.value_objects import DecodingFailed

T = TypeVar("T")


def _decoder(func: Callable[..., T]) -> Callable[..., T]:
    """Convertit les erreurs de structure en DecodingFailed."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            name = func.__name__.removeprefix("decode_")
            raise DecodingFailed(f"{name}: {type(e).__name__}: {e}") from e

    return wrapper


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse une date ISO 8601 ('2023-05-01T00:00:00Z')."""
    if not value:
        return None
    return datetime.fromisoformat(value)


def _expect_list(payload: Any) -> list:
    if not isinstance(payload, list):
        raise TypeError(f"expected a list, got {type(payload).__name__}")
    return payload


@_decoder
def decode_movie(payload: dict[str, Any], instance_id: Optional[str] = None) -> Movie:
    movie_file = payload.get("movieFile")
    return Movie(
        id=int(payload.get("id", 0)),
        instance_id=instance_id,
        title=payload["title"],
        sort_title=payload.get("sortTitle", ""),
        studio=payload.get("studio"),
        year=int(payload.get("year", 0)),
        runtime=int(payload.get("runtime", 0)),
        overview=payload.get("overview"),
        certification=payload.get("certification"),
        genres=tuple(payload.get("genres", [])),
        status=MovieStatus(payload.get("status", "tba")),
        minimum_availability=MovieStatus(payload.get("minimumAvailability", "released")),
        monitored=bool(payload.get("monitored", False)),
        quality_profile_id=int(payload.get("qualityProfileId", 0)),
        size_on_disk=payload.get("sizeOnDisk"),
        has_file=bool(payload.get("hasFile", False)),
        root_folder_path=payload.get("rootFolderPath"),
        added=_parse_date(payload.get("added")),
        in_cinemas=_parse_date(payload.get("inCinemas")),
        physical_release=_parse_date(payload.get("physicalRelease")),
        digital_release=_parse_date(payload.get("digitalRelease")),
        images=tuple(
            MovieImage(
                cover_type=image["coverType"],
                remote_url=image.get("remoteUrl"),
                url=image.get("url"),
            )
            for image in payload.get("images", [])
        ),
        movie_file=MovieFile(movie_id=int(movie_file["movieId"])) if movie_file else None,
    )


@_decoder
def decode_movies(payload: Any, instance_id: Optional[str] = None) -> list[Movie]:
    return [decode_movie(item, instance_id) for item in _expect_list(payload)]


@_decoder
def decode_series(payload: dict[str, Any], instance_id: Optional[str] = None) -> Series:
    return Series(
        id=int(payload["id"]),
        instance_id=instance_id,
        title=payload["title"],
        year=int(payload.get("year", 0)),
        overview=payload.get("overview"),
        monitored=bool(payload.get("monitored", False)),
        quality_profile_id=int(payload.get("qualityProfileId", 0)),
        added=_parse_date(payload.get("added")),
    )


@_decoder
def decode_series_list(payload: Any, instance_id: Optional[str] = None) -> list[Series]:
    return [decode_series(item, instance_id) for item in _expect_list(payload)]


@_decoder
def decode_episode(payload: dict[str, Any], instance_id: Optional[str] = None) -> Episode:
    return Episode(
        id=int(payload["id"]),
        instance_id=instance_id,
        series_id=int(payload["seriesId"]),
        season_number=int(payload["seasonNumber"]),
        episode_number=int(payload["episodeNumber"]),
        title=payload.get("title"),
        overview=payload.get("overview"),
        air_date_utc=_parse_date(payload.get("airDateUtc")),
        monitored=bool(payload.get("monitored", False)),
        has_file=bool(payload.get("hasFile", False)),
    )


@_decoder
def decode_episodes(payload: Any, instance_id: Optional[str] = None) -> list[Episode]:
    return [decode_episode(item, instance_id) for item in _expect_list(payload)]


@_decoder
def decode_history_event(
    payload: dict[str, Any], instance_id: Optional[str] = None
) -> MediaHistoryEvent:
    return MediaHistoryEvent(
        id=int(payload["id"]),
        instance_id=instance_id,
        event_type=payload["eventType"],
        source_title=payload.get("sourceTitle"),
        date=_parse_date(payload.get("date")),
        episode_id=payload.get("episodeId"),
        movie_id=payload.get("movieId"),
        data={str(k): str(v) for k, v in (payload.get("data") or {}).items()},
    )


@_decoder
def decode_history_page(
    payload: dict[str, Any], instance_id: Optional[str] = None
) -> HistoryPage:
    records = [
        decode_history_event(item, instance_id)
        for item in _expect_list(payload["records"])
    ]
    return HistoryPage(
        records=records,
        total_records=int(payload.get("totalRecords", len(records))),
    )


# Bits du champ indexerFlags (entier) des releases Radarr
_INDEXER_FLAGS = {
    1: "freeleech",
    2: "halfleech",
    4: "doubleupload",
    8: "golden",
    16: "approved",
    32: "internal",
    128: "scene",
    256: "freeleech75",
    512: "freeleech25",
}


def _indexer_flags(value: Any) -> tuple[str, ...]:
    """indexerFlags est un masque de bits (Radarr v3+) ou une liste de noms."""
    if not value:
        return ()
    if isinstance(value, int):
        return tuple(name for bit, name in _INDEXER_FLAGS.items() if value & bit)
    return tuple(str(flag) for flag in value)


@_decoder
def decode_release(
    payload: dict[str, Any], instance_id: Optional[str] = None, movie_id: int = 0
) -> MovieRelease:
    quality = (payload.get("quality") or {}).get("quality") or {}
    return MovieRelease(
        guid=payload["guid"],
        instance_id=instance_id,
        movie_id=movie_id,
        title=payload["title"],
        quality_name=quality.get("name", "Unknown"),
        size=int(payload.get("size") or 0),
        age_minutes=float(payload.get("ageMinutes") or 0),
        protocol=payload.get("protocol", "torrent"),
        indexer=payload.get("indexer"),
        indexer_id=int(payload.get("indexerId") or 0),
        seeders=payload.get("seeders"),
        leechers=payload.get("leechers"),
        rejected=bool(payload.get("rejected", False)),
        rejections=tuple(payload.get("rejections") or ()),
        indexer_flags=_indexer_flags(payload.get("indexerFlags")),
    )


@_decoder
def decode_releases(
    payload: Any, instance_id: Optional[str] = None, movie_id: int = 0
) -> list[MovieRelease]:
    return [decode_release(item, instance_id, movie_id) for item in _expect_list(payload)]


@_decoder
def decode_quality_profiles(payload: Any) -> list[QualityProfile]:
    return [
        QualityProfile(id=int(item["id"]), name=item["name"])
        for item in _expect_list(payload)
    ]


@_decoder
def decode_status(payload: dict[str, Any]) -> InstanceStatus:
    return InstanceStatus(
        app_name=payload.get("appName"),
        instance_name=payload.get("instanceName"),
        version=payload.get("version"),
    )
