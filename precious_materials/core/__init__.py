"""
Core module - podstawowe komponenty silnika.

Zawiera:
- ConfigLoader: Wczytywanie konfiguracji YAML z defaults
- DEFAULT_DATA_PATH: Ścieżka do katalogu data/
"""

from .config_loader import ConfigLoader, DEFAULT_DATA_PATH

__all__ = ["ConfigLoader", "DEFAULT_DATA_PATH"]
