"""
RuleCompiler - kompilacja szablonów reguł do reguł hosta.

KROKI KOMPILACJI (per szablon):
═══════════════════════════════════════════════════════════════════════════

    1. Świeży dict z zamrożonego ciała szablonu (thaw)
    2. Etykieta "PMR: {material} {grade} {category}" jeśli brak
       i reguła nie jest adnotacją (Note)
    3. Szablon z markerem:
         - wartość parametru z kontekstu, a gdy brak/niepoprawna
           -> default parametru (pierwszy wybór)
         - zastosowanie przez resolver z MARKER_RESOLVERS (po MarkerKind)
         - etykieta z marker.label, zły wzorzec -> ostrzeżenie
         - nieznany rodzaj markera -> ostrzeżenie, ciało bez zmian
    4. Tag modułu (ConcreteRule.to_dict dodaje flags)

Kompilacja nigdy nie rzuca wyjątków - ostrzeżenia idą do EventLoggera.

Resolvery markerów (rejestr jak ITEM_EFFECT_APPLICATORS):

    predicate    -> body["predicate"] = ["item:trait:{value}"]
    damage_type  -> body["type"] = value
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Callable, Mapping, TYPE_CHECKING

from .rule_template import (
    RuleTemplate,
    ParameterizedRuleTemplate,
    DynamicMarker,
    MarkerKind,
    ConcreteRule,
    ANNOTATION_KINDS,
    thaw,
)
from .parameters import DynamicParameter

if TYPE_CHECKING:
    from .effect_table import EffectSpec
    from ..events.event_logger import EventLogger


@dataclass(frozen=True)
class CompileContext:
    """
    Kontekst kompilacji.

    Attributes:
        material: Slug materiału
        grade: Poziom
        category: Kategoria itema
        parameters: Wartości parametrów dynamicznych (nazwa -> wartość)
        item_id: ID itema (tylko do logów)
    """

    material: str
    grade: str
    category: str
    parameters: Mapping[str, Any] = field(default_factory=dict)
    item_id: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════
# ETYKIETY
# ═══════════════════════════════════════════════════════════════════════════

# Błędy str.format_map dla wzorców z danych ({choice[x]}, {choice.foo}, "{")
LABEL_FORMAT_ERRORS = (KeyError, IndexError, ValueError, TypeError, AttributeError)


class _LabelFields(dict):
    """Słownik dla str.format_map - brakujące pola zostają jako {nazwa}."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render_label(pattern: str, **fields: Any) -> str:
    """Formatuje szablon etykiety. Rzuca LABEL_FORMAT_ERRORS dla złych wzorców."""
    if not isinstance(pattern, str):
        raise TypeError(f"label pattern must be a string, got {type(pattern).__name__}")
    return pattern.format_map(_LabelFields(fields))


def format_label(pattern: Any, **fields: Any) -> Any:
    """
    Formatuje szablon etykiety bez wyjątków.

    Nieznane pola zostają w tekście, błędne wzorce (i nie-stringi)
    zwracane są bez zmian.
    """
    try:
        return render_label(pattern, **fields)
    except LABEL_FORMAT_ERRORS:
        return pattern


def _capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


# ═══════════════════════════════════════════════════════════════════════════
# RESOLVERY MARKERÓW
# ═══════════════════════════════════════════════════════════════════════════

def resolve_predicate(body: Dict[str, Any], value: str) -> None:
    """Ogranicza regułę do cechy `item:trait:{value}`."""
    body["predicate"] = [f"item:trait:{value}"]


def resolve_damage_type(body: Dict[str, Any], value: str) -> None:
    """Ustawia typ reguły (np. typ odporności)."""
    body["type"] = value


MARKER_RESOLVERS: Dict[MarkerKind, Callable[[Dict[str, Any], str], None]] = {
    MarkerKind.PREDICATE: resolve_predicate,
    MarkerKind.DAMAGE_TYPE: resolve_damage_type,
}



# ═══════════════════════════════════════════════════════════════════════════
# KOMPILATOR
# ═══════════════════════════════════════════════════════════════════════════

class RuleCompiler:
    """
    Kompiluje szablony z tabeli efektów do ConcreteRule.

    Usage:
        compiler = RuleCompiler("precious-materials-rework", "PMR", params, logger)
        ctx = CompileContext("dragonhide", "standard", "armor", {"dragon_element": "cold"})
        rules = compiler.compile_all(spec, ctx)
    """

    def __init__(
        self,
        module_id: str,
        label_prefix: str = "PMR",
        parameters: Optional[Dict[str, DynamicParameter]] = None,
        logger: Optional["EventLogger"] = None,
    ):
        self.module_id = module_id
        self.label_prefix = label_prefix
        self.parameters = parameters or {}
        self.logger = logger

    def default_label(self, context: CompileContext) -> str:
        return f"{self.label_prefix}: {context.material} {context.grade} {context.category}"

    def resolve_parameter(self, name: str, context: CompileContext) -> Optional[str]:
        """
        Zwraca wartość parametru dla kompilacji.

        Kolejność: wartość z kontekstu (jeśli poprawna) -> default.
        Niepoprawna wartość jest logowana jako INVALID_PARAMETER.
        Nieznany parametr bez wartości -> None.
        """
        definition = self.parameters.get(name)
        value = context.parameters.get(name)

        if definition is None:
            return str(value) if value else None

        if value in (None, ""):
            return definition.default

        if not definition.is_valid(value):
            if self.logger:
                self.logger.log_invalid_parameter(context.item_id, name, value)
            return definition.default

        return str(value)

    def compile(self, template: RuleTemplate, context: CompileContext) -> ConcreteRule:
        """
        Kompiluje jeden szablon.

        Args:
            template: Szablon z tabeli (nie jest modyfikowany)
            context: Kontekst kompilacji

        Returns:
            ConcreteRule bez markera, z tagiem modułu
        """
        body = thaw(template.body)

        if not body.get("label") and template.kind not in ANNOTATION_KINDS:
            body["label"] = self.default_label(context)

        if isinstance(template, ParameterizedRuleTemplate):
            self._apply_marker(body, template.marker, context)

        return ConcreteRule(key=template.key, body=body, module_id=self.module_id)

    def compile_all(
        self,
        spec: Optional["EffectSpec"],
        context: CompileContext,
    ) -> List[ConcreteRule]:
        """Kompiluje wszystkie szablony EffectSpec (kolejność zachowana)."""
        if spec is None:
            return []
        return [self.compile(t, context) for t in spec.rule_templates]

    def _apply_marker(
        self,
        body: Dict[str, Any],
        marker: DynamicMarker,
        context: CompileContext,
    ) -> None:
        resolver = MARKER_RESOLVERS.get(marker.kind)
        value = self.resolve_parameter(marker.parameter, context)

        if resolver is None or value is None:
            if self.logger:
                self.logger.log_unresolved_marker(marker.apply, marker.parameter, context.item_id)
            return

        resolver(body, value)
        if marker.label:
            self._apply_marker_label(body, marker, value, context)

    def _apply_marker_label(
        self,
        body: Dict[str, Any],
        marker: DynamicMarker,
        value: str,
        context: CompileContext,
    ) -> None:
        """Regeneruje etykietę z marker.label; zły wzorzec zostaje bez zmian."""
        try:
            body["label"] = render_label(
                marker.label,
                choice=_capitalize(value),
                value=body.get("value", ""),
                material=context.material,
                grade=context.grade,
                category=context.category,
            )
        except LABEL_FORMAT_ERRORS as e:
            if isinstance(marker.label, str):
                body["label"] = marker.label
            if self.logger:
                self.logger.log_invalid_label(context.item_id, marker.label, str(e))
