"""
Testy dla klasyfikacji itemów i ostrzeżeń kompatybilności.
"""

import pytest

from precious_materials.core.config_loader import ConfigLoader
from precious_materials.items.classifier import classify
from precious_materials.items.compatibility import CompatibilityChecker, ItemShapeHints
from precious_materials.materials.effect_table import Category


@pytest.fixture
def checker() -> CompatibilityChecker:
    return CompatibilityChecker.from_list(ConfigLoader().get_compatibility_rules())


# ═══════════════════════════════════════════════════════════════════════════
# CLASSIFIER
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("item_type,subtype,expected", [
    ("weapon", None, Category.WEAPON),
    ("armor", "heavy", Category.ARMOR),
    ("armor", None, Category.ARMOR),
    ("armor", "shield", Category.SHIELD),
    ("shield", None, Category.SHIELD),
    ("consumable", None, None),
    ("equipment", "shield", None),
    (None, None, None),
])
def test_classify(item_type, subtype, expected):
    assert classify(item_type, subtype) == expected


# ═══════════════════════════════════════════════════════════════════════════
# COMPATIBILITY
# ═══════════════════════════════════════════════════════════════════════════

def test_wyroot_on_longsword_warns(checker):
    """Test ostrzeżenia dla Darkwood na broni bez drewnianej powierzchni."""
    warnings = checker.check("duskwood", Category.WEAPON, ItemShapeHints(base_item="longsword"))

    assert len(warnings) == 1
    assert warnings[0].code == "wyroot_incompatible"
    assert warnings[0].message


def test_wyroot_on_staff_is_fine(checker):
    assert checker.check("duskwood", Category.WEAPON, ItemShapeHints(base_item="staff")) == []
    assert checker.check("duskwood", "weapon", ItemShapeHints(slug="greatclub-of-doom")) == []


def test_wyroot_without_hints_is_silent(checker):
    """Test braku podpowiedzi - brak ostrzeżenia."""
    assert checker.check("duskwood", Category.WEAPON, ItemShapeHints()) == []


def test_wyroot_on_armor_is_not_checked(checker):
    assert checker.check("duskwood", Category.ARMOR, ItemShapeHints(base_item="longsword")) == []


def test_singing_steel_armor_group(checker):
    """Test Singing Steel - tylko chain/composite."""
    bad = checker.check("singing-steel", Category.ARMOR, ItemShapeHints(group="plate"))
    good = checker.check("singing-steel", Category.ARMOR, ItemShapeHints(group="chain"))

    assert [w.code for w in bad] == ["singing_steel_armor_type"]
    assert good == []


def test_singing_steel_group_exact_match(checker):
    warnings = checker.check("singing-steel", Category.ARMOR, ItemShapeHints(group="chainmail"))
    assert len(warnings) == 1
