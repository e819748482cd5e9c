"""
Szablony reguł i reguły skompilowane.

Szablon reguły (RuleTemplate) to opis jednej reguły hosta z tabeli
materiałów. Występuje w dwóch wariantach:

    StaticRuleTemplate
    ─────────────────────────────────────────────────────────────
    Reguła stała - kompilacja to klon + tag modułu + etykieta.

    ParameterizedRuleTemplate
    ─────────────────────────────────────────────────────────────
    Reguła zależna od parametru wybranego przez użytkownika
    (np. żywioł smoka). Niesie DynamicMarker:

        dynamic:
          parameter: dragon_element
          apply: damage_type | predicate
          label: "PMR: Dragonhide Armor ({choice} Resist {value})"

Wynik kompilacji to ConcreteRule - osobny typ, który nigdy nie zawiera
markera i zawsze niesie tag modułu:

    {"key": "Resistance", "type": "cold", "value": 5, "label": "...",
     "flags": {"precious-materials-rework": {"owned_by_module": True}}}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional, Any, Mapping, Union
from enum import Enum
import copy


OWNED_FLAG = "owned_by_module"


def freeze(value: Any) -> Any:
    """Rekurencyjnie zamienia dict -> MappingProxyType, list -> tuple."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Odwrotność freeze() - świeże, mutowalne kopie (tuple -> list)."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    return value


# ═══════════════════════════════════════════════════════════════════════════
# RULE KINDS
# ═══════════════════════════════════════════════════════════════════════════

class RuleKind(Enum):
    """Rodzaje reguł znane z tabeli (klucze reguł hosta)."""

    RESISTANCE = "Resistance"
    WEAKNESS = "Weakness"
    FLAT_MODIFIER = "FlatModifier"
    NOTE = "Note"
    ROLL_TWICE = "RollTwice"
    ADJUST_DEGREE = "AdjustDegreeOfSuccess"

    @classmethod
    def from_string(cls, s: str) -> Optional["RuleKind"]:
        """Konwertuje klucz reguły na RuleKind (None dla nieznanych)."""
        for member in cls:
            if member.value == s:
                return member
        return None


# Rodzaje będące czystą adnotacją - bez syntetyzowanej etykiety
ANNOTATION_KINDS = frozenset({RuleKind.NOTE})


# ═══════════════════════════════════════════════════════════════════════════
# DYNAMIC MARKER
# ═══════════════════════════════════════════════════════════════════════════

class MarkerKind(Enum):
    """Sposób zastosowania wartości parametru."""

    PREDICATE = "predicate"        # predicate = ["item:trait:{value}"]
    DAMAGE_TYPE = "damage_type"    # type = value, etykieta regenerowana

    @classmethod
    def from_string(cls, s: str) -> Optional["MarkerKind"]:
        for member in cls:
            if member.value == s:
                return member
        return None


@dataclass(frozen=True)
class DynamicMarker:
    """
    Marker parametru dynamicznego w szablonie.

    Attributes:
        parameter: Nazwa parametru (klucz w dynamic_parameters)
        apply: Surowy rodzaj zastosowania (może być nieznany)
        label: Opcjonalny szablon etykiety ({choice}, {value}, ...)
    """

    parameter: str
    apply: str
    label: Optional[str] = None

    @property
    def kind(self) -> Optional[MarkerKind]:
        return MarkerKind.from_string(self.apply)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DynamicMarker":
        """Tworzy marker z danych YAML."""
        return cls(
            parameter=str(data.get("parameter", "")),
            apply=str(data.get("apply", "")),
            label=data.get("label"),
        )


# ═══════════════════════════════════════════════════════════════════════════
# RULE TEMPLATES
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StaticRuleTemplate:
    """Szablon reguły bez parametrów. Ciało jest zamrożone (tylko do odczytu)."""

    key: str
    body: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "body", freeze(self.body))

    @property
    def kind(self) -> Optional[RuleKind]:
        return RuleKind.from_string(self.key)


@dataclass(frozen=True)
class ParameterizedRuleTemplate:
    """Szablon reguły czekający na wartość parametru."""

    key: str
    marker: DynamicMarker
    body: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "body", freeze(self.body))

    @property
    def kind(self) -> Optional[RuleKind]:
        return RuleKind.from_string(self.key)


RuleTemplate = Union[StaticRuleTemplate, ParameterizedRuleTemplate]


def parse_rule_template(data: Dict[str, Any]) -> RuleTemplate:
    """
    Tworzy szablon reguły z danych YAML.

    Blok `dynamic` jest zdejmowany z ciała reguły i zamieniany
    na DynamicMarker.
    """
    body = {k: v for k, v in data.items() if k not in ("key", "dynamic")}
    key = str(data.get("key", ""))

    dynamic = data.get("dynamic")
    if isinstance(dynamic, dict):
        return ParameterizedRuleTemplate(
            key=key,
            marker=DynamicMarker.from_dict(dynamic),
            body=body,
        )
    return StaticRuleTemplate(key=key, body=body)


# ═══════════════════════════════════════════════════════════════════════════
# CONCRETE RULE
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ConcreteRule:
    """
    Skompilowana reguła gotowa do zapisania na itemie.

    Attributes:
        key: Klucz reguły hosta (Resistance, Note, ...)
        body: Pola reguły (bez key i flags)
        module_id: ID modułu użyte w tagu własności
    """

    key: str
    body: Dict[str, Any]
    module_id: str

    @property
    def kind(self) -> Optional[RuleKind]:
        return RuleKind.from_string(self.key)

    @property
    def label(self) -> Optional[str]:
        return self.body.get("label")

    @property
    def owned_by_module(self) -> bool:
        return True

    def get(self, name: str, default: Any = None) -> Any:
        return self.body.get(name, default)

    def to_dict(self) -> Dict[str, Any]:
        """Zwraca regułę w formacie hosta (świeża kopia)."""
        result: Dict[str, Any] = {"key": self.key}
        result.update(copy.deepcopy(self.body))
        result["flags"] = {self.module_id: {OWNED_FLAG: True}}
        return result


# ═══════════════════════════════════════════════════════════════════════════
# HELPERY - reguły na itemie
# ═══════════════════════════════════════════════════════════════════════════

def is_module_owned(rule: Dict[str, Any], module_id: str) -> bool:
    """Sprawdza czy reguła hosta została wygenerowana przez moduł."""
    flags = rule.get("flags")
    if not isinstance(flags, dict):
        return False
    scope = flags.get(module_id)
    return isinstance(scope, dict) and scope.get(OWNED_FLAG) is True


def strip_module_rules(rules: List[Dict[str, Any]], module_id: str) -> List[Dict[str, Any]]:
    """
    Zwraca listę reguł bez reguł modułu.

    Kolejność pozostałych reguł jest zachowana, wynik jest kopią.
    Operacja idempotentna.
    """
    return [copy.deepcopy(r) for r in rules if not is_module_owned(r, module_id)]
