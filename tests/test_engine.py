"""
Testy dla PreciousMaterialsEngine i EventLoggera.

Testuje:
- initialize()/shutdown() i rejestrację materiałów własnych
- preview() bez dotykania hosta
- Serializację logu zdarzeń
"""

import json
import pytest

from precious_materials.engine import PreciousMaterialsEngine
from precious_materials.events.event_logger import EventLogger, EventType
from precious_materials.host.memory import InMemoryHostStore, HOST_MATERIALS
from precious_materials.items.compatibility import ItemShapeHints


@pytest.fixture
def store() -> InMemoryHostStore:
    return InMemoryHostStore()


@pytest.fixture
def engine(store) -> PreciousMaterialsEngine:
    return PreciousMaterialsEngine(store)


# ═══════════════════════════════════════════════════════════════════════════
# LIFECYCLE
# ═══════════════════════════════════════════════════════════════════════════

def test_initialize_registers_custom_materials(engine, store):
    """Test rejestracji Throneglass i Singing Steel w dropdownie hosta."""
    added = engine.initialize(store.material_labels)

    assert added == ["throneglass", "singing-steel"]
    assert store.material_labels["throneglass"] == "Throneglass"
    assert store.material_labels["singing-steel"] == "Singing Steel"
    assert len(engine.logger.get_events_by_type(EventType.MATERIAL_REGISTERED)) == 2
    assert len(engine.logger.get_events_by_type(EventType.ENGINE_INIT)) == 1


def test_shutdown_removes_only_added_materials(store):
    """Test shutdown() - materiały hosta zostają nietknięte."""
    store.material_labels["throneglass"] = "Host Throneglass"
    engine = PreciousMaterialsEngine(store)

    added = engine.initialize(store.material_labels)
    assert added == ["singing-steel"]

    engine.shutdown()

    assert store.material_labels["throneglass"] == "Host Throneglass"
    assert "singing-steel" not in store.material_labels
    for slug in HOST_MATERIALS:
        assert slug in store.material_labels
    assert engine.initialized is False


def test_initialize_is_idempotent(engine, store):
    engine.initialize(store.material_labels)
    engine.initialize(store.material_labels)

    assert len(engine.logger.get_events_by_type(EventType.ENGINE_INIT)) == 1
    assert engine.registered_materials == ["throneglass", "singing-steel"]


def test_injected_custom_materials(store):
    engine = PreciousMaterialsEngine(store, custom_materials={"starmetal": "Starmetal"})
    registry = {}

    assert engine.initialize(registry) == ["starmetal"]
    engine.shutdown()
    assert registry == {}


def test_material_names(engine):
    names = engine.material_names()

    assert len(names) == 11
    assert names["duskwood"] == "Darkwood"
    assert names["dawnsilver"]


# ═══════════════════════════════════════════════════════════════════════════
# PREVIEW
# ═══════════════════════════════════════════════════════════════════════════

def test_preview_dragonhide_with_element(engine, store):
    """Test podglądu bez zapisu na hoście."""
    plan = engine.preview("armor", "dragonhide", "high", parameters={"dragon_element": "acid"})

    assert plan.category == "armor"
    assert plan.has_effects
    assert plan.rules[0].get("type") == "acid"
    assert store.operations == []

    data = plan.to_dict()
    assert data["rules"][0]["flags"]["precious-materials-rework"]["owned_by_module"] is True
    assert data["notes"]


def test_preview_actions_and_warnings(engine):
    plan = engine.preview(
        "weapon", "duskwood", "high",
        hints=ItemShapeHints(base_item="rapier"),
    )

    data = plan.to_dict()
    assert [a["key"] for a in data["actions"]] == ["absorb-life-point"]
    assert [w["code"] for w in data["warnings"]] == ["wyroot_incompatible"]


def test_preview_unknown_combination(engine):
    plan = engine.preview("consumable", "adamantine", "high")

    assert plan.category is None
    assert not plan.has_effects
    assert plan.to_dict()["rules"] == []


# ═══════════════════════════════════════════════════════════════════════════
# EVENT LOGGER
# ═══════════════════════════════════════════════════════════════════════════

def test_event_logger_serialization(tmp_path):
    """Test zapisu logu do JSON."""
    logger = EventLogger()
    logger.log_no_effects("item-1", "silver", "low", "weapon")
    logger.log_unknown_action("ghost", "item-1")

    data = json.loads(logger.to_json())
    assert data["metadata"]["module_id"] == "precious-materials-rework"
    assert [e["type"] for e in data["events"]] == ["NO_EFFECTS", "UNKNOWN_ACTION"]
    assert [e["level"] for e in data["events"]] == ["info", "warning"]

    path = tmp_path / "logs" / "events.json"
    logger.save(str(path))
    assert json.loads(path.read_text(encoding="utf-8")) == data


def test_event_logger_filters():
    logger = EventLogger()
    logger.log_rules_injected("a", "silver", "low", "weapon", 1)
    logger.log_rules_cleared("b")
    logger.log_compatibility_warning("a", "code", "msg")

    assert len(logger.get_events_for_item("a")) == 2
    assert [e.event_type for e in logger.get_warnings()] == [EventType.COMPATIBILITY_WARNING]

    logger.clear()
    assert logger.get_event_count() == 0


def test_event_logger_keeps_only_recent_events():
    """Test ograniczenia logu dla długo żyjącego silnika."""
    logger = EventLogger(max_events=3)
    for i in range(10):
        logger.log_rules_cleared(f"item-{i}")

    assert logger.get_event_count() == 3
    assert [e.item_id for e in logger.events] == ["item-7", "item-8", "item-9"]
    assert [e.sequence for e in logger.events] == [7, 8, 9]


def test_engine_logger_is_bounded_by_config(engine):
    assert engine.logger.max_events == 1000
    for _ in range(600):
        engine.preview("armor", "dragonhide", "standard", parameters={"dragon_element": "banana"})
    assert engine.logger.get_event_count() == 1000
