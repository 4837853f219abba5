"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe ARRSYNC_,
et peut optionnellement être fournie via un fichier .env.

Les instances sont fournies en JSON dans ARRSYNC_INSTANCES, à la place du
stockage de configuration de l'appareil :

    ARRSYNC_INSTANCES='[{"label": "Synology", "type": "Radarr",
                         "url": "http://10.0.1.5:7878", "api_key": "..."}]'
"""

import uuid
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arrsync.core.entities import Instance, InstanceType

# Trouver le fichier .env à la racine du projet (parent de arrsync/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class InstanceSettings(BaseModel):
    """Identifiants d'une instance Radarr/Sonarr.

    Sans id explicite, l'id est derive du type, du label et de l'URL : il
    reste le meme d'un chargement a l'autre, ce qui permet de le citer dans
    ARRSYNC_MOVIE_INSTANCE.
    """

    id: Optional[str] = None
    type: InstanceType = InstanceType.RADARR
    label: str
    url: str
    api_key: str

    @model_validator(mode="after")
    def derive_id(self) -> "InstanceSettings":
        if not self.id:
            name = f"{self.type.value}|{self.label}|{self.url.rstrip('/').lower()}"
            self.id = str(uuid.uuid5(uuid.NAMESPACE_URL, name))
        return self

    def to_instance(self) -> Instance:
        return Instance(
            id=self.id,
            type=self.type,
            label=self.label,
            url=self.url,
            api_key=self.api_key,
        )


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe ARRSYNC_.
    Exemple : ARRSYNC_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="ARRSYNC_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Instances configurées
    instances: list[InstanceSettings] = Field(default_factory=list)
    movie_instance: Optional[str] = Field(default=None)

    # Client API
    request_timeout: float = Field(default=30.0, gt=0)
    max_rate_limit_attempts: int = Field(default=5, ge=1)

    # Stores
    search_debounce_seconds: float = Field(default=0.75, ge=0)
    freshness_window_seconds: float = Field(default=30.0, ge=0)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/arrsync.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()

    def find_instance(self, label_or_id: str) -> Optional[Instance]:
        """Retrouve une instance par son label (insensible à la casse) ou son id."""
        for entry in self.instances:
            if entry.id == label_or_id or entry.label.casefold() == label_or_id.casefold():
                return entry.to_instance()
        return None

    @property
    def selected_movie_instance(self) -> Optional[Instance]:
        """Instance Radarr sélectionnée, ou la première Radarr configurée."""
        radarr = [i for i in self.instances if i.type is InstanceType.RADARR]
        for entry in radarr:
            if entry.id == self.movie_instance:
                return entry.to_instance()
        return radarr[0].to_instance() if radarr else None
