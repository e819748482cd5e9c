"""
Klasyfikacja itemów hosta do kategorii tabeli efektów.

    weapon              -> WEAPON
    armor (shield)      -> SHIELD
    armor (inne)        -> ARMOR
    shield              -> SHIELD
    pozostałe           -> None (silnik ignoruje item)
"""

from __future__ import annotations
from typing import Optional

from ..materials.effect_table import Category


def classify(item_type: Optional[str], item_subtype: Optional[str] = None) -> Optional[Category]:
    """
    Zwraca kategorię itema lub None.

    Args:
        item_type: Typ dokumentu hosta (weapon / armor / shield / ...)
        item_subtype: Podkategoria (dla armor: "shield" oznacza tarczę)
    """
    if item_type == "weapon":
        return Category.WEAPON
    if item_type == "armor":
        return Category.SHIELD if item_subtype == "shield" else Category.ARMOR
    if item_type == "shield":
        return Category.SHIELD
    return None
