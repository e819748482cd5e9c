"""
Loader konfiguracji z automatycznym uzupełnianiem wartości domyślnych.

Silnik materiałów jest w pełni data-driven - wszystkie definicje
pochodzą z plików YAML:
- defaults.yaml: konfiguracja modułu, wartości bazowe, parametry dynamiczne
- materials.yaml: tabela efektów (material -> grade -> category)
- actions.yaml: definicje akcji tworzonych na aktorze

Logika merge (uzupełniania defaults):
    1. Wczytaj defaults.yaml
    2. Wczytaj konkretną definicję (np. wpis adamantine/high/shield)
    3. Dla każdego klucza w effect_defaults / action_defaults, którego
       brak w definicji - użyj wartości domyślnej
    4. Definicja może nadpisać defaults

Przykład:
    defaults.yaml:
        effect_defaults:
            rules: []
            actions: []
            notes: []

    materials.yaml:
        adamantine:
            grades:
                high:
                    shield:
                        actions: [destructive-counter]
                        # rules nie podane -> [] z defaults

Użycie:
    >>> loader = ConfigLoader("data/")
    >>> adamantine = loader.load_material("adamantine")
    >>> adamantine["grades"]["high"]["shield"]["rules"]
    []
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, List, Optional
import yaml
import copy


# Katalog data/ w korzeniu repozytorium
DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent.parent / "data"


class ConfigLoader:
    """
    Ładuje konfigurację z plików YAML z automatycznym merge defaults.

    Attributes:
        data_path (Path): Ścieżka do folderu data/
        _defaults (Dict): Cache wczytanych defaults
        _materials (Dict): Cache wczytanych materiałów
        _actions (Dict): Cache wczytanych akcji

    Example:
        >>> loader = ConfigLoader()
        >>> loader.get_module_id()
        'precious-materials-rework'
        >>> loader.load_action("soul-counter")["action_type"]
        'reaction'
    """

    def __init__(self, data_path: Optional[str] = None):
        """
        Inicjalizuje loader ze ścieżką do danych.

        Args:
            data_path: Ścieżka do folderu z plikami YAML (domyślnie data/)
        """
        self.data_path = Path(data_path) if data_path else DEFAULT_DATA_PATH
        self._defaults: Optional[Dict] = None
        self._materials: Optional[Dict] = None
        self._actions: Optional[Dict] = None

    # ─────────────────────────────────────────────────────────────────────────
    # WCZYTYWANIE PLIKÓW
    # ─────────────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> Dict:
        """
        Wczytuje plik YAML.

        Args:
            filename: Nazwa pliku (bez ścieżki)

        Returns:
            Dict: Zawartość pliku YAML

        Raises:
            FileNotFoundError: Jeśli plik nie istnieje
        """
        filepath = self.data_path / filename
        with open(filepath, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def get_defaults(self) -> Dict:
        """
        Zwraca słownik z wartościami domyślnymi.

        Cache'uje wczytany plik - kolejne wywołania są szybkie.
        """
        if self._defaults is None:
            self._defaults = self._load_yaml("defaults.yaml")
        return self._defaults

    def get_module_config(self) -> Dict:
        """Zwraca sekcję module (id, label_prefix)."""
        return self.get_defaults().get("module", {})

    def get_module_id(self) -> str:
        """Zwraca ID modułu używane jako klucz flag."""
        return self.get_module_config().get("id", "precious-materials-rework")

    def get_label_prefix(self) -> str:
        """Zwraca prefiks etykiet generowanych reguł."""
        return self.get_module_config().get("label_prefix", "PMR")

    def get_max_events(self) -> Optional[int]:
        """Zwraca limit zdarzeń w EventLoggerze (None = bez limitu)."""
        return self.get_module_config().get("max_events", 1000)

    def get_grades(self) -> List[str]:
        return list(self.get_defaults().get("grades", ["low", "standard", "high"]))

    def get_categories(self) -> List[str]:
        return list(self.get_defaults().get("categories", ["weapon", "armor", "shield"]))

    def get_effect_defaults(self) -> Dict:
        """Zwraca domyślny kształt wpisu tabeli efektów."""
        return self.get_defaults().get("effect_defaults", {})

    def get_action_defaults(self) -> Dict:
        """Zwraca domyślny kształt definicji akcji."""
        return self.get_defaults().get("action_defaults", {})

    def get_dynamic_parameters(self) -> Dict[str, Dict]:
        """
        Zwraca definicje parametrów dynamicznych.

        Returns:
            Dict: Mapa nazwa_parametru -> {choices, default, materials, prompt}
        """
        return copy.deepcopy(self.get_defaults().get("dynamic_parameters", {}))

    def get_custom_materials(self) -> Dict[str, str]:
        """Zwraca materiały własne (slug -> nazwa) do rejestracji u hosta."""
        return dict(self.get_defaults().get("custom_materials", {}))

    def get_compatibility_rules(self) -> List[Dict]:
        """Zwraca reguły ostrzeżeń o niekompatybilności."""
        return copy.deepcopy(self.get_defaults().get("compatibility", []))

    # ─────────────────────────────────────────────────────────────────────────
    # ŁADOWANIE MATERIAŁÓW
    # ─────────────────────────────────────────────────────────────────────────

    def _get_all_materials_raw(self) -> Dict:
        """Zwraca wszystkie surowe definicje materiałów."""
        if self._materials is None:
            data = self._load_yaml("materials.yaml")
            self._materials = data.get("materials", {})
        return self._materials

    def load_material(self, slug: str) -> Dict:
        """
        Wczytuje definicję materiału z uzupełnionymi defaults.

        Każdy wpis grade/category jest merge'owany z effect_defaults,
        więc zawsze zawiera klucze rules, actions i notes.

        Args:
            slug: Slug materiału (klucz w materials.yaml)

        Returns:
            Dict: {"id", "name", "grades": {grade: {category: entry}}}

        Raises:
            KeyError: Jeśli materiał nie istnieje
        """
        materials = self._get_all_materials_raw()

        if slug not in materials:
            raise KeyError(f"Material '{slug}' not found in materials.yaml")

        raw = materials[slug]
        effect_defaults = self.get_effect_defaults()

        grades: Dict[str, Dict[str, Dict]] = {}
        for grade, categories in (raw.get("grades") or {}).items():
            grades[grade] = {
                category: self._deep_merge(effect_defaults, entry or {})
                for category, entry in (categories or {}).items()
            }

        return {
            "id": slug,
            "name": raw.get("name", slug),
            "grades": grades,
        }

    def load_all_materials(self) -> Dict[str, Dict]:
        """
        Wczytuje wszystkie definicje materiałów.

        Returns:
            Dict[str, Dict]: Mapa slug -> definicja
        """
        materials = self._get_all_materials_raw()
        return {slug: self.load_material(slug) for slug in materials.keys()}

    def get_material_slugs(self) -> List[str]:
        return list(self._get_all_materials_raw().keys())

    # ─────────────────────────────────────────────────────────────────────────
    # ŁADOWANIE AKCJI
    # ─────────────────────────────────────────────────────────────────────────

    def _get_all_actions_raw(self) -> Dict:
        """Zwraca wszystkie surowe definicje akcji."""
        if self._actions is None:
            data = self._load_yaml("actions.yaml")
            self._actions = data.get("actions", {})
        return self._actions

    def load_action(self, action_key: str) -> Dict:
        """
        Wczytuje definicję akcji z uzupełnionymi defaults.

        Args:
            action_key: Klucz akcji (np. "soul-counter")

        Returns:
            Dict: Pełna definicja akcji

        Raises:
            KeyError: Jeśli akcja nie istnieje
        """
        actions = self._get_all_actions_raw()

        if action_key not in actions:
            raise KeyError(f"Action '{action_key}' not found in actions.yaml")

        result = self._deep_merge(self.get_action_defaults(), actions[action_key] or {})
        result["id"] = action_key

        return result

    def load_all_actions(self) -> Dict[str, Dict]:
        """Wczytuje wszystkie definicje akcji (key -> definicja)."""
        actions = self._get_all_actions_raw()
        return {key: self.load_action(key) for key in actions.keys()}

    def get_action_keys(self) -> List[str]:
        return list(self._get_all_actions_raw().keys())

    # ─────────────────────────────────────────────────────────────────────────
    # HELPERY
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _deep_merge(base: Dict, override: Dict) -> Dict:
        """
        Głęboko łączy dwa słowniki.

        Override nadpisuje wartości w base.
        Nested dicts są merge'owane rekurencyjnie.

        Args:
            base: Słownik bazowy (domyślne wartości)
            override: Słownik nadpisujący

        Returns:
            Dict: Połączony słownik
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def reload(self) -> None:
        """
        Czyści cache i wymusza ponowne wczytanie plików.

        Przydatne podczas edycji plików YAML w runtime.
        """
        self._defaults = None
        self._materials = None
        self._actions = None
