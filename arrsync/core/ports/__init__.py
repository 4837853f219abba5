"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Ports client API : Contrats pour les serveurs Radarr/Sonarr
- IArrAPIClient : Interface du client API partagé
- HistoryPage : Page d'historique renvoyée par le serveur
- CommandKind : Commandes serveur déclenchables
"""

from arrsync.core.ports.api_clients import CommandKind, HistoryPage, IArrAPIClient

__all__ = [
    "CommandKind",
    "HistoryPage",
    "IArrAPIClient",
]
