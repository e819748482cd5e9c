"""
EffectTable - niezmienna tabela efektów materiałów.

STRUKTURA:
═══════════════════════════════════════════════════════════════════════════

    Table[material][grade][category] -> EffectSpec

    EffectSpec:
        rule_templates  - uporządkowane szablony reguł
        action_keys     - klucze akcji z katalogu
        notes           - notatki dla GM (bez wpływu na działanie)

    Brak wpisu dla kombinacji to poprawny wynik ("brak efektów"),
    nigdy błąd. Tabela nie jest modyfikowana po zbudowaniu - kompilator
    klonuje szablony przy każdym użyciu.

FLOW:
═══════════════════════════════════════════════════════════════════════════

    1. ConfigLoader wczytuje materials.yaml (z effect_defaults)
    2. EffectTable.from_loader() buduje MaterialDefinition per slug
    3. lookup(material, grade, category) -> EffectSpec | None
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional, Any, Tuple, Mapping, Set, Union, TYPE_CHECKING
from enum import Enum

from .rule_template import (
    RuleTemplate,
    ParameterizedRuleTemplate,
    parse_rule_template,
)

if TYPE_CHECKING:
    from ..core.config_loader import ConfigLoader


# ═══════════════════════════════════════════════════════════════════════════
# GRADE / CATEGORY
# ═══════════════════════════════════════════════════════════════════════════

class Grade(Enum):
    """Poziom materiału."""

    LOW = "low"
    STANDARD = "standard"
    HIGH = "high"

    @classmethod
    def from_string(cls, s: Optional[str]) -> Optional["Grade"]:
        """Konwertuje string na Grade (None dla pustych/nieznanych)."""
        for member in cls:
            if member.value == s:
                return member
        return None


class Category(Enum):
    """Kategoria itema w tabeli efektów."""

    WEAPON = "weapon"
    ARMOR = "armor"
    SHIELD = "shield"

    @classmethod
    def from_string(cls, s: Optional[str]) -> Optional["Category"]:
        for member in cls:
            if member.value == s:
                return member
        return None


def _key(value: Union[str, Enum, None]) -> str:
    """Normalizuje enum/string/None do klucza tabeli."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


# ═══════════════════════════════════════════════════════════════════════════
# EFFECT SPEC
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EffectSpec:
    """
    Efekty jednej kombinacji material/grade/category.

    Attributes:
        material: Slug materiału
        grade: Poziom
        category: Kategoria itema
        rule_templates: Szablony reguł (kolejność istotna)
        action_keys: Klucze akcji z katalogu
        notes: Notatki dla GM
    """

    material: str
    grade: str
    category: str
    rule_templates: Tuple[RuleTemplate, ...] = ()
    action_keys: Tuple[str, ...] = ()
    notes: Tuple[str, ...] = ()

    @classmethod
    def from_dict(
        cls,
        material: str,
        grade: str,
        category: str,
        data: Dict[str, Any],
    ) -> "EffectSpec":
        """Tworzy EffectSpec z wpisu materials.yaml."""
        templates = tuple(parse_rule_template(r) for r in data.get("rules", []) or [])

        # Duplikaty kluczy akcji dałyby podwójne akcje na aktorze
        action_keys: List[str] = []
        for key in data.get("actions", []) or []:
            if key not in action_keys:
                action_keys.append(key)

        return cls(
            material=material,
            grade=grade,
            category=category,
            rule_templates=templates,
            action_keys=tuple(action_keys),
            notes=tuple(data.get("notes", []) or []),
        )

    @property
    def has_rules(self) -> bool:
        return len(self.rule_templates) > 0

    @property
    def has_actions(self) -> bool:
        return len(self.action_keys) > 0

    def required_parameters(self) -> Set[str]:
        """Zwraca nazwy parametrów używanych przez szablony."""
        return {
            t.marker.parameter
            for t in self.rule_templates
            if isinstance(t, ParameterizedRuleTemplate)
        }


# ═══════════════════════════════════════════════════════════════════════════
# MATERIAL DEFINITION
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MaterialDefinition:
    """Materiał z wszystkimi poziomami i kategoriami."""

    slug: str
    name: str
    grades: Mapping[str, Mapping[str, EffectSpec]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_dict(cls, slug: str, data: Dict[str, Any]) -> "MaterialDefinition":
        """Tworzy MaterialDefinition z wyniku ConfigLoader.load_material()."""
        grades: Dict[str, Mapping[str, EffectSpec]] = {}
        for grade, categories in (data.get("grades") or {}).items():
            grades[grade] = MappingProxyType({
                category: EffectSpec.from_dict(slug, grade, category, entry or {})
                for category, entry in (categories or {}).items()
            })
        return cls(
            slug=slug,
            name=data.get("name", slug),
            grades=MappingProxyType(grades),
        )

    def get(self, grade: str, category: str) -> Optional[EffectSpec]:
        return self.grades.get(grade, {}).get(category)


# ═══════════════════════════════════════════════════════════════════════════
# EFFECT TABLE
# ═══════════════════════════════════════════════════════════════════════════

class EffectTable:
    """
    Tabela efektów material -> grade -> category.

    Usage:
        table = EffectTable.from_loader(ConfigLoader())
        spec = table.lookup("sovereign-steel", Grade.HIGH, Category.SHIELD)
        spec.action_keys  # ("improved-soul-counter",)
    """

    def __init__(self, materials: Dict[str, MaterialDefinition]):
        self._materials: Mapping[str, MaterialDefinition] = MappingProxyType(dict(materials))

    @classmethod
    def from_dict(cls, data: Dict[str, Dict]) -> "EffectTable":
        """
        Buduje tabelę ze słownika slug -> definicja.

        Args:
            data: Format ConfigLoader.load_all_materials()
        """
        return cls({
            slug: MaterialDefinition.from_dict(slug, entry)
            for slug, entry in data.items()
        })

    @classmethod
    def from_loader(cls, loader: "ConfigLoader") -> "EffectTable":
        return cls.from_dict(loader.load_all_materials())

    # ─────────────────────────────────────────────────────────────────────────
    # LOOKUP
    # ─────────────────────────────────────────────────────────────────────────

    def lookup(
        self,
        material: Union[str, None],
        grade: Union[str, Grade, None],
        category: Union[str, Category, None],
    ) -> Optional[EffectSpec]:
        """
        Zwraca efekty dla kombinacji lub None.

        Puste/nieznane wartości dają None - to nie jest błąd.
        """
        definition = self._materials.get(_key(material))
        if definition is None:
            return None
        return definition.get(_key(grade), _key(category))

    def get_material(self, slug: str) -> Optional[MaterialDefinition]:
        return self._materials.get(slug)

    def materials(self) -> List[str]:
        """Zwraca listę slugów materiałów."""
        return list(self._materials.keys())

    def grades_for(self, material: str) -> List[str]:
        definition = self._materials.get(material)
        return list(definition.grades.keys()) if definition else []

    def categories_for(self, material: str, grade: str) -> List[str]:
        definition = self._materials.get(material)
        if definition is None:
            return []
        return list(definition.grades.get(grade, {}).keys())

    def all_action_keys(self) -> Set[str]:
        """Wszystkie klucze akcji używane w tabeli."""
        keys: Set[str] = set()
        for definition in self._materials.values():
            for categories in definition.grades.values():
                for spec in categories.values():
                    keys.update(spec.action_keys)
        return keys

    def __contains__(self, material: object) -> bool:
        return material in self._materials

    def __len__(self) -> int:
        return len(self._materials)
