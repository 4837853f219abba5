"""
Media entities.

Entities representing movies, series, episodes, history records and indexer
releases as returned by Radarr and Sonarr servers.

Every entity carries the id of the instance it was fetched from, since ids
are only unique within one server.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class MovieStatus(Enum):
    """Release status of a movie."""

    TBA = "tba"
    ANNOUNCED = "announced"
    IN_CINEMAS = "inCinemas"
    RELEASED = "released"
    DELETED = "deleted"

    @property
    def label(self) -> str:
        return _MOVIE_STATUS_LABELS[self]


_MOVIE_STATUS_LABELS = {
    MovieStatus.TBA: "TBA",
    MovieStatus.ANNOUNCED: "Announced",
    MovieStatus.IN_CINEMAS: "In Cinemas",
    MovieStatus.RELEASED: "Released",
    MovieStatus.DELETED: "Deleted",
}


@dataclass
class MovieImage:
    """Artwork reference (poster, fanart...) of a movie."""

    cover_type: str
    remote_url: Optional[str] = None
    url: Optional[str] = None


@dataclass
class MovieFile:
    """File attached to a movie on disk."""

    movie_id: int


@dataclass
class Movie:
    """
    Movie managed by (or looked up through) a Radarr instance.

    Attributes:
        id: Radarr movie ID (0 for lookup results not yet added)
        instance_id: Instance the movie was fetched from
        title: Display title
        sort_title: Title used for sorting by the server
        year: Release year
        runtime: Runtime in minutes
        status: Release status
        minimum_availability: Availability required before searching
        monitored: Whether the server monitors the movie
        quality_profile_id: Quality profile assigned on the server
        size_on_disk: Size of the downloaded file in bytes
        has_file: Whether a file is present on disk
        added: Date the movie was added to the server
    """

    id: int
    instance_id: Optional[str] = None
    title: str = ""
    sort_title: str = ""
    studio: Optional[str] = None
    year: int = 0
    runtime: int = 0
    overview: Optional[str] = None
    certification: Optional[str] = None
    genres: tuple[str, ...] = ()
    status: MovieStatus = MovieStatus.TBA
    minimum_availability: MovieStatus = MovieStatus.RELEASED
    monitored: bool = False
    quality_profile_id: int = 0
    size_on_disk: Optional[int] = None
    has_file: bool = False
    root_folder_path: Optional[str] = None
    added: Optional[datetime] = None
    in_cinemas: Optional[datetime] = None
    physical_release: Optional[datetime] = None
    digital_release: Optional[datetime] = None
    images: tuple[MovieImage, ...] = ()
    movie_file: Optional[MovieFile] = None

    @property
    def key(self) -> tuple[Optional[str], int]:
        return (self.instance_id, self.id)

    @property
    def exists(self) -> bool:
        """Lookup results already added to the server carry a real id."""
        return self.id > 0

    @property
    def is_downloaded(self) -> bool:
        return self.has_file and self.movie_file is not None

    @property
    def human_runtime(self) -> str:
        hours, minutes = divmod(self.runtime, 60)
        return f"{hours}h {minutes}m"

    @property
    def human_size(self) -> str:
        return format_bytes(self.size_on_disk or 0)

    @property
    def human_genres(self) -> str:
        return ", ".join(self.genres)

    @property
    def remote_poster(self) -> Optional[str]:
        return self._remote_image("poster")

    @property
    def remote_fanart(self) -> Optional[str]:
        return self._remote_image("fanart")

    def _remote_image(self, cover_type: str) -> Optional[str]:
        for image in self.images:
            if image.cover_type == cover_type:
                return image.remote_url
        return None


@dataclass
class Series:
    """
    TV series managed by a Sonarr instance.

    Attributes:
        id: Sonarr series ID
        instance_id: Instance the series was fetched from
        title: Display title
        year: First air year
        monitored: Whether the server monitors the series
        added: Date the series was added to the server
    """

    id: int
    instance_id: Optional[str] = None
    title: str = ""
    year: int = 0
    overview: Optional[str] = None
    monitored: bool = False
    quality_profile_id: int = 0
    added: Optional[datetime] = None

    @property
    def key(self) -> tuple[Optional[str], int]:
        return (self.instance_id, self.id)


@dataclass
class Episode:
    """
    Individual episode of a Sonarr series.

    Attributes:
        id: Sonarr episode ID
        instance_id: Instance the episode was fetched from
        series_id: Reference to parent Series
        season_number: Season number (0 for specials)
        episode_number: Episode number within season
        title: Episode title
        air_date_utc: Original air date
        monitored: Whether the server monitors the episode
        has_file: Whether a file is present on disk
    """

    id: int
    instance_id: Optional[str] = None
    series_id: int = 0
    season_number: int = 0
    episode_number: int = 0
    title: Optional[str] = None
    overview: Optional[str] = None
    air_date_utc: Optional[datetime] = None
    monitored: bool = False
    has_file: bool = False

    @property
    def key(self) -> tuple[Optional[str], int]:
        return (self.instance_id, self.id)

    @property
    def episode_label(self) -> str:
        return f"S{self.season_number:02d}E{self.episode_number:02d}"


@dataclass
class MediaHistoryEvent:
    """
    History record (grab, import, deletion...) reported by a server.

    Attributes:
        id: Server history record ID
        instance_id: Instance the record was fetched from
        event_type: Server event type (grabbed, downloadFolderImported...)
        source_title: Release name the event refers to
        date: Event timestamp
        episode_id: Episode the event belongs to (Sonarr)
        movie_id: Movie the event belongs to (Radarr)
    """

    id: int
    instance_id: Optional[str] = None
    event_type: str = ""
    source_title: Optional[str] = None
    date: Optional[datetime] = None
    episode_id: Optional[int] = None
    movie_id: Optional[int] = None
    data: dict[str, str] = field(default_factory=dict)

    @property
    def key(self) -> tuple[Optional[str], int]:
        return (self.instance_id, self.id)


class PeerHealth(Enum):
    """Seeder availability of a torrent release."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    @classmethod
    def from_seeders(cls, seeders: Optional[int]) -> "PeerHealth":
        count = seeders or 0
        if count >= 50:
            return cls.HIGH
        if count >= 10:
            return cls.MEDIUM
        if count >= 1:
            return cls.LOW
        return cls.NONE


@dataclass
class MovieRelease:
    """
    Release found by an interactive search of the indexers of a Radarr instance.

    Releases have no server id: they are identified by their guid.

    Attributes:
        guid: Indexer identifier of the release
        instance_id: Instance the release was fetched from
        movie_id: Movie the search was run for
        title: Release name
        quality_name: Quality detected by the server (e.g. ``Bluray-1080p``)
        size: Size in bytes
        age_minutes: Time since the release was published
        protocol: ``torrent`` or ``usenet``
        seeders: Seeder count (torrents only)
        rejected: Whether the server would refuse to grab it
        indexer_flags: Flags set by the indexer (freeleech...)
    """

    guid: str
    instance_id: Optional[str] = None
    movie_id: int = 0
    title: str = ""
    quality_name: str = "Unknown"
    size: int = 0
    age_minutes: float = 0.0
    protocol: str = "torrent"
    indexer: Optional[str] = None
    indexer_id: int = 0
    seeders: Optional[int] = None
    leechers: Optional[int] = None
    rejected: bool = False
    rejections: tuple[str, ...] = ()
    indexer_flags: tuple[str, ...] = ()

    @property
    def key(self) -> tuple[Optional[str], str]:
        return (self.instance_id, self.guid)

    @property
    def is_torrent(self) -> bool:
        return self.protocol == "torrent"

    @property
    def quality_label(self) -> str:
        return self.quality_name

    @property
    def size_label(self) -> str:
        return format_bytes(self.size)

    @property
    def age_label(self) -> str:
        minutes = int(self.age_minutes)
        if minutes < 60:
            return _plural(minutes, "minute")
        if minutes < 60 * 24:
            return _plural(minutes // 60, "hour")
        return _plural(minutes // (60 * 24), "day")

    @property
    def type_label(self) -> str:
        if self.is_torrent:
            return _plural(self.seeders or 0, "Seeder")
        return "Usenet"

    @property
    def indexer_label(self) -> str:
        return self.indexer or f"Indexer {self.indexer_id}"

    @property
    def peer_health(self) -> PeerHealth:
        return PeerHealth.from_seeders(self.seeders)


@dataclass
class QualityProfile:
    """Quality profile defined on a server."""

    id: int
    name: str


def format_bytes(size: int) -> str:
    """Format a byte count with binary units (e.g. ``1.4 GB``)."""
    value = float(size)
    for unit in ("bytes", "KB", "MB", "GB"):
        if abs(value) < 1024:
            if unit == "bytes":
                return f"{int(value)} bytes"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"
