"""
Testy dla ActionCatalog.

Testuje:
- Ładowanie definicji akcji z YAML
- Payload w formacie hosta
- Nieznane klucze (ostrzeżenie + pominięcie)
- Spójność tabeli efektów z katalogiem
"""

import pytest

from precious_materials.core.config_loader import ConfigLoader
from precious_materials.events.event_logger import EventLogger, EventType
from precious_materials.actions.catalog import ActionCatalog, SubEntityDefinition
from precious_materials.materials.effect_table import EffectTable


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def logger() -> EventLogger:
    return EventLogger()


@pytest.fixture
def catalog(logger) -> ActionCatalog:
    return ActionCatalog.from_loader(ConfigLoader(), logger=logger)


# ═══════════════════════════════════════════════════════════════════════════
# TESTS
# ═══════════════════════════════════════════════════════════════════════════

def test_catalog_loads_all_actions(catalog):
    assert len(catalog) == 12
    assert "improved-soul-counter" in catalog


def test_resolve_known_key(catalog, logger):
    """Test rozwiązywania znanego klucza."""
    definition = catalog.resolve("absorb-life-point")

    assert definition.name == "Absorb Life Point"
    assert definition.action_type == "action"
    assert definition.actions == 1
    assert definition.traits == ("necromancy", "plant")
    assert logger.get_event_count() == 0


def test_resolve_unknown_key_logs_warning(catalog, logger):
    """Test nieznanego klucza - None i ostrzeżenie."""
    assert catalog.resolve("summon-dragon", item_id="item-1") is None

    warnings = logger.get_events_by_type(EventType.UNKNOWN_ACTION)
    assert len(warnings) == 1
    assert warnings[0].item_id == "item-1"
    assert warnings[0].data["action_key"] == "summon-dragon"


def test_resolve_all_skips_unknown(catalog):
    resolved = catalog.resolve_all(("soul-counter", "missing", "dispelling-slice"))
    assert [d.key for d in resolved] == ["soul-counter", "dispelling-slice"]


def test_payload_shape(catalog):
    """Test kształtu danych akcji dla hosta."""
    payload = catalog.resolve("soul-counter").to_payload()

    assert payload["name"] == "Soul Counter"
    assert payload["type"] == "action"
    assert payload["system"]["actionType"] == {"value": "reaction"}
    assert payload["system"]["actions"] == {"value": None}
    assert payload["system"]["traits"] == {"value": ["abjuration"]}
    assert payload["system"]["description"]["value"].startswith("<p>")
    assert "flags" not in payload


def test_payload_is_fresh_copy(catalog):
    definition = catalog.resolve("soul-counter")
    first = definition.to_payload()
    first["system"]["traits"]["value"].append("mutated")

    assert definition.to_payload()["system"]["traits"]["value"] == ["abjuration"]


def test_every_table_action_is_in_catalog(catalog):
    """Test czy każda akcja z tabeli efektów ma definicję."""
    table = EffectTable.from_loader(ConfigLoader())
    for key in table.all_action_keys():
        assert key in catalog, key


def test_definition_from_minimal_dict():
    definition = SubEntityDefinition.from_dict("x", {})
    assert definition.name == "x"
    assert definition.item_type == "action"
    assert definition.traits == ()
