"""
Testy dla EffectTable i szablonów reguł.

Testuje:
- Parsowanie szablonów (statyczne / z markerem)
- Lookup (enum / string / puste wartości)
- Brak wpisu = brak efektów (None)
- Determinizm i niezmienność tabeli
"""

import pytest

from precious_materials.core.config_loader import ConfigLoader
from precious_materials.materials.effect_table import EffectTable, EffectSpec, Grade, Category
from precious_materials.materials.rule_template import (
    StaticRuleTemplate,
    ParameterizedRuleTemplate,
    MarkerKind,
    RuleKind,
    parse_rule_template,
    strip_module_rules,
    is_module_owned,
)


MODULE_ID = "precious-materials-rework"


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="module")
def table() -> EffectTable:
    return EffectTable.from_loader(ConfigLoader())


# ═══════════════════════════════════════════════════════════════════════════
# RULE TEMPLATES
# ═══════════════════════════════════════════════════════════════════════════

def test_parse_static_template():
    """Test parsowania szablonu bez markera."""
    template = parse_rule_template({"key": "Resistance", "type": "fire", "value": 5})

    assert isinstance(template, StaticRuleTemplate)
    assert template.kind == RuleKind.RESISTANCE
    assert template.body == {"type": "fire", "value": 5}


def test_parse_parameterized_template():
    """Test zdejmowania bloku dynamic do DynamicMarker."""
    template = parse_rule_template({
        "key": "Resistance",
        "type": "fire",
        "value": 5,
        "dynamic": {"parameter": "dragon_element", "apply": "damage_type"},
    })

    assert isinstance(template, ParameterizedRuleTemplate)
    assert template.marker.parameter == "dragon_element"
    assert template.marker.kind == MarkerKind.DAMAGE_TYPE
    assert "dynamic" not in template.body
    assert "key" not in template.body


def test_unknown_marker_kind():
    template = parse_rule_template({"key": "Note", "dynamic": {"parameter": "x", "apply": "weird"}})
    assert template.marker.kind is None


def test_strip_module_rules_keeps_order_and_is_idempotent():
    """Test zdejmowania reguł modułu."""
    rules = [
        {"key": "Strike", "label": "user-1"},
        {"key": "Note", "flags": {MODULE_ID: {"owned_by_module": True}}},
        {"key": "FlatModifier", "label": "user-2", "flags": {"other": {"x": 1}}},
    ]

    once = strip_module_rules(rules, MODULE_ID)
    twice = strip_module_rules(once, MODULE_ID)

    assert [r["label"] for r in once] == ["user-1", "user-2"]
    assert once == twice
    assert len(rules) == 3


def test_is_module_owned_requires_exact_tag():
    assert not is_module_owned({"flags": {MODULE_ID: {"owned_by_module": "yes"}}}, MODULE_ID)
    assert not is_module_owned({"flags": {"other-module": {"owned_by_module": True}}}, MODULE_ID)
    assert is_module_owned({"flags": {MODULE_ID: {"owned_by_module": True}}}, MODULE_ID)


# ═══════════════════════════════════════════════════════════════════════════
# LOOKUP
# ═══════════════════════════════════════════════════════════════════════════

def test_table_contains_all_materials(table):
    assert len(table) == 11
    assert "dragonhide" in table
    assert "unobtainium" not in table


def test_lookup_with_enums_and_strings(table):
    """Test lookup dla enumów i stringów."""
    by_enum = table.lookup("sovereign-steel", Grade.HIGH, Category.SHIELD)
    by_str = table.lookup("sovereign-steel", "high", "shield")

    assert by_enum is by_str
    assert by_enum.action_keys == ("improved-soul-counter",)
    assert not by_enum.has_rules


def test_lookup_miss_returns_none(table):
    """Test braku wpisu - to nie jest błąd."""
    assert table.lookup("unobtainium", "high", "weapon") is None
    assert table.lookup("dragonhide", "low", "armor") is None
    assert table.lookup("adamantine", "", "weapon") is None
    assert table.lookup(None, None, None) is None


def test_lookup_is_deterministic(table):
    first = table.lookup("cold-iron", "standard", "weapon")
    second = table.lookup("cold-iron", "standard", "weapon")

    assert first == second
    assert len(first.rule_templates) == 1
    assert first.rule_templates[0].key == "Note"


def test_required_parameters(table):
    dragonhide = table.lookup("dragonhide", "standard", "armor")
    silver = table.lookup("silver", "standard", "shield")

    assert dragonhide.required_parameters() == {"dragon_element"}
    assert silver.required_parameters() == set()


def test_table_is_read_only(table):
    definition = table.get_material("adamantine")
    with pytest.raises(TypeError):
        definition.grades["legendary"] = {}


def test_looked_up_templates_are_frozen():
    """Test czy ciała szablonów z tabeli są tylko do odczytu (także zagnieżdżone)."""
    table = EffectTable.from_loader(ConfigLoader())
    template = table.lookup("adamantine", "standard", "armor").rule_templates[0]

    with pytest.raises(TypeError):
        template.body["value"] = 999

    assert table.lookup("adamantine", "standard", "armor").rule_templates[0].body["value"] == 2

    nested = parse_rule_template({"key": "FlatModifier", "value": 1, "predicate": ["magical"]})
    assert nested.body["predicate"] == ("magical",)
    with pytest.raises(AttributeError):
        nested.body["predicate"].append("x")


def test_grades_and_categories(table):
    assert table.grades_for("dragonhide") == ["standard", "high"]
    assert set(table.categories_for("adamantine", "high")) == {"armor", "shield", "weapon"}
    assert table.grades_for("unobtainium") == []


def test_effect_spec_deduplicates_actions():
    spec = EffectSpec.from_dict("x", "low", "shield", {"actions": ["a", "b", "a"]})
    assert spec.action_keys == ("a", "b")


def test_grade_and_category_from_string():
    assert Grade.from_string("standard") == Grade.STANDARD
    assert Grade.from_string("epic") is None
    assert Category.from_string("shield") == Category.SHIELD
    assert Category.from_string("") is None
