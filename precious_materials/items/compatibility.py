"""
Ostrzeżenia o niekompatybilności materiału z kształtem itema.

Reguły z defaults.yaml (sekcja compatibility). Ostrzeżenia są wyłącznie
informacyjne - nigdy nie blokują kompilacji reguł. Brak podpowiedzi
(puste pola itema) oznacza brak ostrzeżenia.

    - code: wyroot_incompatible
      material: duskwood
      category: weapon
      hints: [base_item, slug]      # pierwsze niepuste pole
      match: contains               # contains | equals
      allowed: [club, staff, bo-staff, greatclub]
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Any, Tuple, Union

from ..materials.effect_table import Category


@dataclass(frozen=True)
class ItemShapeHints:
    """Podpowiedzi o kształcie itema (bazowy item, slug, grupa)."""

    base_item: Optional[str] = None
    slug: Optional[str] = None
    group: Optional[str] = None

    def first(self, names: Tuple[str, ...]) -> str:
        """Zwraca pierwszą niepustą wartość spośród wskazanych pól."""
        for name in names:
            value = getattr(self, name, None)
            if value:
                return str(value)
        return ""


@dataclass(frozen=True)
class CompatibilityWarning:
    code: str
    message: str
    material: str
    category: str


@dataclass(frozen=True)
class CompatibilityRule:
    """Jedna reguła kompatybilności."""

    code: str
    material: str
    category: str
    hints: Tuple[str, ...]
    allowed: Tuple[str, ...]
    match: str = "contains"
    message: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompatibilityRule":
        return cls(
            code=data["code"],
            material=data["material"],
            category=data["category"],
            hints=tuple(data.get("hints", [])),
            allowed=tuple(data.get("allowed", [])),
            match=data.get("match", "contains"),
            message=data.get("message", ""),
        )

    def applies_to(self, material: str, category: str) -> bool:
        return self.material == material and self.category == category

    def is_satisfied(self, hint: str) -> bool:
        """Czy wartość podpowiedzi spełnia regułę."""
        if self.match == "equals":
            return hint in self.allowed
        return any(allowed in hint for allowed in self.allowed)


class CompatibilityChecker:
    """
    Sprawdza reguły kompatybilności.

    Usage:
        checker = CompatibilityChecker.from_list(loader.get_compatibility_rules())
        warnings = checker.check("duskwood", Category.WEAPON, ItemShapeHints(base_item="longsword"))
    """

    def __init__(self, rules: List[CompatibilityRule]):
        self.rules = list(rules)

    @classmethod
    def from_list(cls, data: List[Dict[str, Any]]) -> "CompatibilityChecker":
        return cls([CompatibilityRule.from_dict(d) for d in data])

    def check(
        self,
        material: str,
        category: Union[str, Category, None],
        hints: ItemShapeHints,
    ) -> List[CompatibilityWarning]:
        """Zwraca listę ostrzeżeń (pusta gdy wszystko w porządku)."""
        if isinstance(category, Category):
            category = category.value

        warnings = []
        for rule in self.rules:
            if not rule.applies_to(material, category or ""):
                continue
            hint = hints.first(rule.hints)
            if not hint or rule.is_satisfied(hint):
                continue
            warnings.append(CompatibilityWarning(
                code=rule.code,
                message=rule.message,
                material=material,
                category=rule.category,
            ))
        return warnings
