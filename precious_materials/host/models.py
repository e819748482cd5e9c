"""
Modele hosta widziane przez silnik.

HostItem        - item z materiałem, regułami i flagami
HostActor       - właściciel itemów i akcji
SubEntityRecord - akcja utworzona na aktorze
ItemChange      - proponowana zmiana itema (pre-commit)

Semantyka ItemChange:
    None  -> pole nie jest zmieniane
    ""    -> pole czyszczone (np. usunięcie materiału)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
import copy

from ..items.compatibility import ItemShapeHints


@dataclass
class HostItem:
    """
    Item hosta (broń, zbroja, tarcza, ...).

    Attributes:
        id: ID itema
        name: Nazwa
        item_type: Typ dokumentu (weapon / armor / shield / ...)
        subtype: Podkategoria (np. "shield" dla armor)
        material_type: Slug materiału ("" = brak)
        material_grade: Poziom materiału ("" = brak)
        rules: Lista reguł (moduł zarządza tylko swoimi)
        flags: Metadane per moduł
        actor_id: Właściciel (None = item poza aktorem)
    """

    id: str
    name: str
    item_type: str
    subtype: Optional[str] = None
    material_type: str = ""
    material_grade: str = ""
    rules: List[Dict[str, Any]] = field(default_factory=list)
    flags: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    actor_id: Optional[str] = None

    # Podpowiedzi kształtu dla ostrzeżeń kompatybilności
    base_item: Optional[str] = None
    slug: Optional[str] = None
    group: Optional[str] = None

    @property
    def has_material(self) -> bool:
        return bool(self.material_type) and bool(self.material_grade)

    @property
    def shape_hints(self) -> ItemShapeHints:
        return ItemShapeHints(base_item=self.base_item, slug=self.slug, group=self.group)

    def get_flag(self, scope: str, key: str, default: Any = None) -> Any:
        return self.flags.get(scope, {}).get(key, default)

    def set_flag(self, scope: str, key: str, value: Any) -> None:
        self.flags.setdefault(scope, {})[key] = value

    def unset_flag(self, scope: str, key: str) -> None:
        scoped = self.flags.get(scope)
        if scoped is not None:
            scoped.pop(key, None)

    def snapshot(self) -> "HostItem":
        """Głęboka kopia (widok itema w danej sesji)."""
        return copy.deepcopy(self)


@dataclass
class HostActor:
    id: str
    name: str


@dataclass
class SubEntityRecord:
    """
    Akcja utworzona na aktorze.

    Attributes:
        id: ID nadane przez hosta
        actor_id: Aktor-właściciel
        data: Dane akcji (name, type, system, ...)
        flags: Metadane per moduł
    """

    id: str
    actor_id: str
    data: Dict[str, Any] = field(default_factory=dict)
    flags: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.data.get("name", "")

    def module_flags(self, module_id: str) -> Dict[str, Any]:
        return self.flags.get(module_id, {})

    def is_owned_by(self, module_id: str) -> bool:
        return self.module_flags(module_id).get("owned_by_module") is True

    def is_linked_to(self, module_id: str, source_item_id: str) -> bool:
        """Czy akcja została utworzona przez moduł dla danego itema."""
        scoped = self.module_flags(module_id)
        return scoped.get("owned_by_module") is True and scoped.get("source_item_id") == source_item_id


@dataclass
class ItemChange:
    """
    Proponowana zmiana itema.

    Attributes:
        material_type: Nowy materiał (None = bez zmian, "" = usunięcie)
        material_grade: Nowy poziom (None = bez zmian, "" = usunięcie)
        parameters: Zmiany parametrów dynamicznych (flagi modułu)
        rules: Lista reguł do zapisania - wypełnia pre-commit
    """

    material_type: Optional[str] = None
    material_grade: Optional[str] = None
    parameters: Dict[str, Any] = field(default_factory=dict)
    rules: Optional[List[Dict[str, Any]]] = None

    @property
    def touches_material(self) -> bool:
        return self.material_type is not None or self.material_grade is not None

    @property
    def touches_parameters(self) -> bool:
        return bool(self.parameters)

    def apply_to(self, item: HostItem, module_id: str) -> None:
        """Zapisuje zmianę na itemie (robi to host przy commicie)."""
        if self.material_type is not None:
            item.material_type = self.material_type
        if self.material_grade is not None:
            item.material_grade = self.material_grade
        for name, value in self.parameters.items():
            if value in (None, ""):
                item.unset_flag(module_id, name)
            else:
                item.set_flag(module_id, name, value)
        if self.rules is not None:
            item.rules = copy.deepcopy(self.rules)
