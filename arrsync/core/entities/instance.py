"""
Entités instance serveur.

Une instance est un serveur Radarr ou Sonarr configuré par l'utilisateur.
Les identifiants (URL, clé API) proviennent d'un stockage de configuration
externe ; le domaine ne fait que les transporter.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class InstanceType(Enum):
    """Type de serveur distant."""

    RADARR = "Radarr"
    SONARR = "Sonarr"


_URL_PLACEHOLDERS = {
    InstanceType.RADARR: "https://10.0.1.1:7878",
    InstanceType.SONARR: "https://10.0.1.1:8989",
}


@dataclass
class Instance:
    """
    Serveur Radarr/Sonarr configuré.

    Attributs :
        id : Identifiant local unique (UUID)
        type : Type de serveur (Radarr ou Sonarr)
        label : Nom affiché (ex: "Synology")
        url : URL de base, sans chemin (ex: "http://10.0.1.5:7878")
        api_key : Clé API (Settings > General > Security)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    type: InstanceType = InstanceType.RADARR
    label: str = ""
    url: str = ""
    api_key: str = ""

    @property
    def url_placeholder(self) -> str:
        """URL d'exemple affichée dans les formulaires pour ce type."""
        return _URL_PLACEHOLDERS[self.type]

    def has_empty_fields(self) -> bool:
        """Vérifie si un des champs obligatoires est vide."""
        return not self.label or not self.url or not self.api_key


@dataclass(frozen=True)
class InstanceStatus:
    """Statut système renvoyé par /api/v3/system/status."""

    app_name: Optional[str] = None
    instance_name: Optional[str] = None
    version: Optional[str] = None
