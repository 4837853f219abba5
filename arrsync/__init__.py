"""
arrsync - Couche de synchronisation entre une interface et des serveurs Radarr/Sonarr.

Ce package fournit des stores reactifs par instance : recuperation, cache
en memoire, commandes de mutation et recherche avec debounce, avec une
taxonomie d'erreurs fermee exposee a la couche de presentation.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (stores, coordination des requetes)
- adapters/ : Couche infrastructure (CLI, client API httpx)
"""

__version__ = "0.1.0"
