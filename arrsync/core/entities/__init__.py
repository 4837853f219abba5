"""
Business entities representing core domain concepts.

Exports:
- Instance: A configured Radarr/Sonarr server
- InstanceType: Server kind (RADARR, SONARR)
- InstanceStatus: System status reported by a server
- Movie: Movie from Radarr
- Series: TV series from Sonarr
- Episode: Individual episode of a series
- MediaHistoryEvent: History record of a server
- MovieRelease: Release found by an interactive indexer search
- PeerHealth: Seeder bucket of a torrent release
- QualityProfile: Quality profile defined on a server
"""

from arrsync.core.entities.instance import Instance, InstanceStatus, InstanceType
from arrsync.core.entities.media import (
    Episode,
    MediaHistoryEvent,
    Movie,
    MovieFile,
    MovieImage,
    MovieRelease,
    MovieStatus,
    PeerHealth,
    QualityProfile,
    Series,
)

__all__ = [
    "Instance",
    "InstanceStatus",
    "InstanceType",
    "Movie",
    "MovieFile",
    "MovieImage",
    "MovieStatus",
    "MovieRelease",
    "PeerHealth",
    "Series",
    "Episode",
    "MediaHistoryEvent",
    "QualityProfile",
]
