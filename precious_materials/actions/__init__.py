"""Actions module - katalog akcji tworzonych na aktorze."""

from .catalog import SubEntityDefinition, ActionCatalog

__all__ = [
    "SubEntityDefinition",
    "ActionCatalog",
]
