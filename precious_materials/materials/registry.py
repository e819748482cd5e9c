"""
Rejestracja materiałów własnych w dropdownie hosta.

Host zna własną listę materiałów (slug -> etykieta). Materiały spoza
niej (Throneglass, Singing Steel) trzeba dopisać przy starcie i zdjąć
przy wyłączeniu - tylko te, które dopisał moduł.
"""

from __future__ import annotations
from typing import Dict, List, Optional, MutableMapping, Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from ..events.event_logger import EventLogger


def register_custom_materials(
    registry: MutableMapping[str, str],
    custom: Dict[str, str],
    logger: Optional["EventLogger"] = None,
) -> List[str]:
    """
    Dopisuje brakujące materiały do rejestru hosta.

    Args:
        registry: Rejestr hosta slug -> etykieta (modyfikowany)
        custom: Materiały własne slug -> etykieta

    Returns:
        Slugi faktycznie dodane (istniejące wpisy hosta nie są nadpisywane)
    """
    added: List[str] = []
    for slug, label in custom.items():
        if slug in registry:
            continue
        registry[slug] = label
        added.append(slug)
        if logger:
            logger.log_material_registered(slug, label)
    return added


def unregister_custom_materials(
    registry: MutableMapping[str, str],
    slugs: Iterable[str],
    logger: Optional["EventLogger"] = None,
) -> None:
    """Usuwa z rejestru hosta wskazane materiały."""
    for slug in slugs:
        if registry.pop(slug, None) is not None and logger:
            logger.log_material_unregistered(slug)
