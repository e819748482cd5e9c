"""
Testy dla RuleCompiler.

Testuje:
- Tag modułu na każdej regule
- Syntetyzowane etykiety (bez etykiet dla Note)
- Markery: damage_type (typ + etykieta), predicate
- Domyślną wartość parametru (brak / niepoprawna wartość)
- Nieznane markery (ostrzeżenie, brak wyjątku)
- Niezmienność szablonów
"""

import pytest

from precious_materials.core.config_loader import ConfigLoader
from precious_materials.events.event_logger import EventLogger, EventType
from precious_materials.materials.effect_table import EffectTable
from precious_materials.materials.parameters import load_parameters
from precious_materials.materials.rule_compiler import (
    RuleCompiler,
    CompileContext,
    MARKER_RESOLVERS,
    format_label,
)
from precious_materials.materials.rule_template import parse_rule_template, is_module_owned, MarkerKind


MODULE_ID = "precious-materials-rework"


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def loader() -> ConfigLoader:
    return ConfigLoader()


@pytest.fixture
def logger() -> EventLogger:
    return EventLogger(MODULE_ID)


@pytest.fixture
def table(loader) -> EffectTable:
    return EffectTable.from_loader(loader)


@pytest.fixture
def compiler(loader, logger) -> RuleCompiler:
    return RuleCompiler(
        module_id=MODULE_ID,
        label_prefix="PMR",
        parameters=load_parameters(loader.get_dynamic_parameters()),
        logger=logger,
    )


def dragonhide_context(**parameters) -> CompileContext:
    return CompileContext("dragonhide", "standard", "armor", parameters)


# ═══════════════════════════════════════════════════════════════════════════
# STATIC RULES
# ═══════════════════════════════════════════════════════════════════════════

def test_every_rule_is_tagged(compiler, table):
    """Test tagu modułu na skompilowanych regułach."""
    spec = table.lookup("cold-iron", "high", "armor")
    rules = compiler.compile_all(spec, CompileContext("cold-iron", "high", "armor"))

    assert len(rules) == len(spec.rule_templates)
    for rule in rules:
        assert is_module_owned(rule.to_dict(), MODULE_ID)


def test_default_label_synthesised(compiler):
    """Test etykiety dla reguły bez label."""
    template = parse_rule_template({"key": "Resistance", "type": "fire", "value": 5})
    rule = compiler.compile(template, CompileContext("adamantine", "low", "armor"))

    assert rule.label == "PMR: adamantine low armor"


def test_note_has_no_synthesised_label(compiler):
    template = parse_rule_template({"key": "Note", "selector": "ac", "text": "hello"})
    rule = compiler.compile(template, CompileContext("adamantine", "low", "armor"))

    assert rule.label is None
    assert "label" not in rule.to_dict()


def test_explicit_label_kept(compiler):
    template = parse_rule_template({"key": "Weakness", "type": "fire", "value": 5, "label": "Mine"})
    rule = compiler.compile(template, CompileContext("duskwood", "standard", "armor"))

    assert rule.label == "Mine"


def test_compile_all_none_spec(compiler):
    assert compiler.compile_all(None, CompileContext("x", "low", "weapon")) == []


def test_template_not_mutated(compiler, table):
    """Test czy kompilacja nie zmienia szablonu z tabeli."""
    spec = table.lookup("dragonhide", "standard", "armor")
    before = [dict(t.body) for t in spec.rule_templates]

    rules = compiler.compile_all(spec, dragonhide_context(dragon_element="acid"))
    rules[0].body["value"] = 999

    assert [dict(t.body) for t in spec.rule_templates] == before


# ═══════════════════════════════════════════════════════════════════════════
# DYNAMIC MARKERS
# ═══════════════════════════════════════════════════════════════════════════

def test_damage_type_marker(compiler, table):
    """Test podstawienia żywiołu do typu odporności."""
    spec = table.lookup("dragonhide", "standard", "armor")
    rules = compiler.compile_all(spec, dragonhide_context(dragon_element="cold"))

    resistance = rules[0]
    assert resistance.key == "Resistance"
    assert resistance.get("type") == "cold"
    assert resistance.label == "PMR: Dragonhide Armor (Cold Resist 5)"


def test_predicate_marker(compiler, table):
    spec = table.lookup("dragonhide", "standard", "armor")
    rules = compiler.compile_all(spec, dragonhide_context(dragon_element="electricity"))

    modifier = rules[1]
    assert modifier.key == "FlatModifier"
    assert modifier.get("predicate") == ["item:trait:electricity"]
    assert modifier.label == "PMR: Dragonhide Armor (vs energy type)"


def test_marker_never_emitted(compiler, table):
    spec = table.lookup("dragonhide", "high", "armor")
    for rule in compiler.compile_all(spec, CompileContext("dragonhide", "high", "armor")):
        data = rule.to_dict()
        assert "dynamic" not in data


def test_missing_parameter_uses_default(compiler, table, logger):
    """Test domyślnego żywiołu (fire) gdy parametr nie jest ustawiony."""
    spec = table.lookup("dragonhide", "standard", "armor")
    rules = compiler.compile_all(spec, dragonhide_context())

    assert rules[0].get("type") == "fire"
    assert rules[0].label == "PMR: Dragonhide Armor (Fire Resist 5)"
    assert rules[1].get("predicate") == ["item:trait:fire"]
    assert logger.get_warnings() == []


def test_invalid_parameter_uses_default(compiler, table, logger):
    spec = table.lookup("dragonhide", "standard", "armor")
    rules = compiler.compile_all(spec, dragonhide_context(dragon_element="sonic"))

    assert rules[0].get("type") == "fire"
    invalid = logger.get_events_by_type(EventType.INVALID_PARAMETER)
    assert len(invalid) == 2
    assert invalid[0].data["value"] == "sonic"


def test_unknown_marker_passes_through(compiler, logger):
    """Test nieznanego markera - kompilacja bez wyjątku, ostrzeżenie."""
    template = parse_rule_template({
        "key": "FlatModifier",
        "selector": "ac",
        "value": 1,
        "dynamic": {"parameter": "dragon_element", "apply": "teleport"},
    })
    rule = compiler.compile(template, dragonhide_context(dragon_element="acid"))

    assert rule.get("value") == 1
    assert "predicate" not in rule.body
    assert "dynamic" not in rule.to_dict()

    warnings = logger.get_events_by_type(EventType.UNRESOLVED_MARKER)
    assert len(warnings) == 1
    assert warnings[0].data["apply"] == "teleport"


def test_unknown_parameter_without_value(compiler, logger):
    template = parse_rule_template({
        "key": "Resistance",
        "type": "fire",
        "value": 5,
        "dynamic": {"parameter": "moon_phase", "apply": "damage_type"},
    })
    rule = compiler.compile(template, dragonhide_context())

    assert rule.get("type") == "fire"
    assert len(logger.get_events_by_type(EventType.UNRESOLVED_MARKER)) == 1


# ═══════════════════════════════════════════════════════════════════════════
# LABELS
# ═══════════════════════════════════════════════════════════════════════════

def test_format_label_tolerates_bad_patterns():
    assert format_label("{choice} Resist", choice="Cold") == "Cold Resist"
    assert format_label("{missing} x", choice="Cold") == "{missing} x"
    assert format_label("broken {", choice="Cold") == "broken {"


def test_format_label_tolerates_indexing_and_attributes():
    assert format_label("{choice[x]} Resist", choice="Cold") == "{choice[x]} Resist"
    assert format_label("{choice.foo} Resist", choice="Cold") == "{choice.foo} Resist"
    assert format_label(42, choice="Cold") == 42


def test_bad_marker_label_is_logged_not_raised(compiler, logger):
    """Test złego wzorca etykiety - reguła kompiluje się, ostrzeżenie w logu."""
    template = parse_rule_template({
        "key": "Resistance",
        "type": "fire",
        "value": 5,
        "dynamic": {
            "parameter": "dragon_element",
            "apply": "damage_type",
            "label": "PMR: {choice[x]} Resist",
        },
    })
    context = CompileContext("dragonhide", "standard", "armor", {"dragon_element": "cold"}, "hide-1")
    rule = compiler.compile(template, context)

    assert rule.get("type") == "cold"
    assert rule.label == "PMR: {choice[x]} Resist"

    warnings = logger.get_events_by_type(EventType.INVALID_LABEL)
    assert len(warnings) == 1
    assert warnings[0].item_id == "hide-1"
    assert warnings[0].data["pattern"] == "PMR: {choice[x]} Resist"


def test_non_string_marker_label_keeps_default_label(compiler, logger):
    template = parse_rule_template({
        "key": "Resistance",
        "type": "fire",
        "value": 5,
        "dynamic": {"parameter": "dragon_element", "apply": "damage_type", "label": 7},
    })
    rule = compiler.compile(template, dragonhide_context(dragon_element="acid"))

    assert rule.get("type") == "acid"
    assert rule.label == "PMR: dragonhide standard armor"
    assert len(logger.get_events_by_type(EventType.INVALID_LABEL)) == 1


def test_unresolved_marker_is_logged_for_item(compiler, logger):
    """Test czy ostrzeżenie o markerze jest przypisane do itema."""
    template = parse_rule_template({
        "key": "FlatModifier",
        "selector": "ac",
        "value": 1,
        "dynamic": {"parameter": "dragon_element", "apply": "teleport"},
    })
    context = CompileContext("dragonhide", "standard", "armor", {}, "hide-2")
    compiler.compile(template, context)

    events = logger.get_events_for_item("hide-2")
    assert [e.event_type for e in events] == [EventType.UNRESOLVED_MARKER]


def test_resolvers_keyed_by_marker_kind():
    assert set(MARKER_RESOLVERS) == {MarkerKind.PREDICATE, MarkerKind.DAMAGE_TYPE}


def test_compiled_body_is_mutable_copy(compiler, table):
    spec = table.lookup("sovereign-steel", "standard", "armor")
    rule = compiler.compile(spec.rule_templates[0], CompileContext("sovereign-steel", "standard", "armor"))

    assert rule.get("predicate") == ["magical"]
    rule.body["predicate"].append("x")
    assert spec.rule_templates[0].body["predicate"] == ("magical",)
